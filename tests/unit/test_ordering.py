import pytest

from pagantic.ordering import (
    ASC,
    DESC,
    LegacySortEncoding,
    OrderEncoding,
    OrderState,
    normalize_order,
)


class TestNormalizeOrder:
    """Test direction normalization."""

    @pytest.mark.parametrize(
        "value,expected",
        [(True, DESC), (False, ASC), (None, ASC), ("", ASC), ("desc", "desc"), ("asc", "asc")],
    )
    def test_normalize(self, value, expected):
        assert normalize_order(value) == expected

    def test_other_truthy_values_pass_through(self):
        assert normalize_order("DESC") == "DESC"


class TestOrderState:
    """Test sort state management."""

    def test_defaults_captured_at_construction(self):
        state = OrderState("createdAt", "desc")
        assert state.default_order_by == "createdAt"
        assert state.default_order == "desc"

    def test_sort_normalizes(self):
        state = OrderState()

        state.sort("name", True)
        assert (state.order_by, state.order) == ("name", "desc")

        state.sort("name", False)
        assert state.order == "asc"

        state.sort("name")
        assert state.order == "asc"

    def test_set_order_does_not_normalize(self):
        state = OrderState()
        state.set_order("name", True)
        assert state.order is True

    def test_reset_to_default_ignores_intermediate_sorts(self):
        state = OrderState("createdAt", "desc")
        state.sort("name", False)
        state.sort("email", True)

        state.reset_to_default()

        assert state.order_by == "createdAt"
        assert state.order == "desc"

    def test_set_order_with_default(self):
        state = OrderState("createdAt", "desc")
        state.set_order("name", "asc", set_default=True)
        state.sort("email", True)

        state.reset_to_default()

        assert (state.order_by, state.order) == ("name", "asc")

    def test_set_order_without_default_keeps_default(self):
        state = OrderState("createdAt", "desc")
        state.set_order("name", "asc")
        state.reset_to_default()
        assert state.order_by == "createdAt"


class TestSortEncoding:
    """Test the outbound sort encodings."""

    def test_order_encoding(self):
        assert OrderEncoding().encode("name", "desc") == {"orderBy": "name", "order": "desc"}

    def test_legacy_encoding(self):
        assert LegacySortEncoding().encode("name", "desc") == {"sortBy": "name", "asc": False}
        assert LegacySortEncoding().encode("name", "asc") == {"sortBy": "name", "asc": True}

    def test_legacy_encoding_defaults_to_ascending(self):
        assert LegacySortEncoding().encode(None, None) == {"sortBy": None, "asc": True}

    def test_state_selects_encoding(self):
        state = OrderState("name", "desc", legacy=True)
        assert state.is_legacy is True
        assert state.encode() == {"sortBy": "name", "asc": False}

        modern = OrderState("name", "desc")
        assert modern.is_legacy is False
        assert modern.encode() == {"orderBy": "name", "order": "desc"}
