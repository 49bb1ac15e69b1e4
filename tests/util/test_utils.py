"""
Unit tests for chainderive.util.utils.
"""

import pytest

from chainderive.util.utils import get_closest_options, missing_name_message

GROUPS = ["society", "staking", "technical_committee", "im_online", "treasury"]


class TestGetClosestOptions:
    """Test class for get_closest_options."""

    @pytest.mark.parametrize(
        "val, expected",
        [
            ("Society", ["society"]),
            ("tech", ["technical_committee"]),
            ("imOnline", ["im_online"]),
            ("technicalCommittee", ["technical_committee"]),
            ("treasry", ["treasury"]),
        ],
    )
    def test_close_matches(self, val, expected):
        assert get_closest_options(val, GROUPS) == expected

    def test_nothing_close(self):
        assert get_closest_options("zzzzzz", GROUPS) is None


class TestMissingNameMessage:
    """Test class for missing_name_message."""

    def test_with_suggestion(self):
        message = missing_name_message("derive group", "socety", "DerivedObject", GROUPS)
        assert message.startswith("DerivedObject has no derive group 'socety'.")
        assert "Did you mean any of the following: ['society']?" in message

    def test_lists_options_when_nothing_close(self):
        message = missing_name_message("method", "zzzzzz", "Derive group 'g'", ["b", "a"])
        assert message.endswith("Available options: ['a', 'b']")

    def test_no_options(self):
        message = missing_name_message("method", "x", "Derive group 'g'", [])
        assert message.endswith("No options are available.")
