"""Tests for resource name builders."""

import pytest

from core.errors import InvalidArgumentError
from core.resource_names import account_owner_path, client_path, filter_set_path


class TestResourceNames:
    """Tests for path construction."""

    def test_account_owner_path(self):
        """Test the account-level owner name."""
        assert account_owner_path("123", "456") == "bidders/123/accounts/456"

    def test_filter_set_path(self):
        """Test the account-level filter set name."""
        assert filter_set_path("123", "456", "fs1") == "bidders/123/accounts/456/filterSets/fs1"

    def test_client_path(self):
        """Test the client buyer name."""
        assert client_path("111", "222") == "accounts/111/clients/222"

    @pytest.mark.parametrize("bidder_id, account_id", [("", "456"), ("123", ""), ("  ", "456"), (None, "456")])
    def test_missing_identifier_rejected(self, bidder_id, account_id):
        """Test that empty or missing identifiers are errors."""
        with pytest.raises(InvalidArgumentError):
            account_owner_path(bidder_id, account_id)

    def test_missing_filter_set_id_rejected(self):
        """Test that the filter set ID is required too."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            filter_set_path("123", "456", "")

        assert exc_info.value.error_detail.details["field"] == "filter_set_id"

    def test_identifiers_are_not_escaped(self):
        """Test that identifiers are inserted verbatim."""
        assert filter_set_path("1", "2", "my set") == "bidders/1/accounts/2/filterSets/my set"
