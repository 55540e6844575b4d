"""Common setup for tests."""

from tests.mock_utils import patch_mockfirestore

# mockfirestore needs FieldFilter and transaction-aware reads before any suite runs.
patch_mockfirestore()
