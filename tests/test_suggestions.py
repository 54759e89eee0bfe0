"""Tests for AI suggestion state."""

from smart_flow.models.field_definitions import FieldConfig
from smart_flow.models.suggestion import SuggestionStatus
from smart_flow.suggestions import (
    apply_suggestion,
    currency_matches,
    get_suggestion_state,
    is_suggestion_applied,
    party_matches,
)


def _field(field_type: str, key: str | None = "suggested", enabled: bool = True) -> FieldConfig:
    return FieldConfig(
        name="value",
        label="Value",
        type=field_type,
        aiSuggestionEnabled=enabled,
        aiSuggestionKey=key,
    )


ADDRESS = {"street": "Main 1", "city": "Bern", "state": "", "postalCode": "3000", "country": "CH"}


class TestSuggestionStatus:
    """Tests for the status progression."""

    def test_disabled(self):
        """Test fields without an enabled key."""
        assert get_suggestion_state(_field("text", enabled=False), "", {"suggested": "x"}).status is SuggestionStatus.DISABLED
        assert get_suggestion_state(_field("text", key=None), "", {"suggested": "x"}).status is SuggestionStatus.DISABLED

    def test_waiting(self):
        """Test no context or an empty context means waiting."""
        assert get_suggestion_state(_field("text"), "", None).status is SuggestionStatus.WAITING
        assert get_suggestion_state(_field("text"), "", {}).status is SuggestionStatus.WAITING

    def test_unavailable(self):
        """Test a context without the key."""
        state = get_suggestion_state(_field("text"), "", {"other": "x"})
        assert state.status is SuggestionStatus.UNAVAILABLE
        state = get_suggestion_state(_field("text"), "", {"suggested": None})
        assert state.status is SuggestionStatus.UNAVAILABLE

    def test_nested_key(self):
        """Test suggestion keys are dot-paths."""
        field = _field("text", key="company.industry")
        state = get_suggestion_state(field, "", {"company": {"industry": "Retail"}})
        assert state.status is SuggestionStatus.AVAILABLE
        assert state.suggested_value == "Retail"


class TestScalarSuggestions:
    """Tests for scalar field suggestions."""

    def test_available_inline_when_empty(self):
        """Test an empty field offers inline apply."""
        state = get_suggestion_state(_field("text"), "", {"suggested": "Retail"})
        assert state.status is SuggestionStatus.AVAILABLE
        assert state.can_apply_inline is True

    def test_not_inline_when_answered(self):
        """Test an answered field does not offer inline apply."""
        state = get_suggestion_state(_field("text"), "Banking", {"suggested": "Retail"})
        assert state.status is SuggestionStatus.AVAILABLE
        assert state.can_apply_inline is False

    def test_applied(self):
        """Test string comparison of scalar values."""
        assert is_suggestion_applied(_field("text"), "Retail", {"suggested": "Retail"})
        assert is_suggestion_applied(_field("number"), "42", {"suggested": 42})
        assert is_suggestion_applied(_field("checkbox"), True, {"suggested": "true"})


class TestCompositeSuggestions:
    """Tests for composite field suggestions."""

    def test_address_applied_from_json(self):
        """Test stored JSON and suggested mapping compare per part."""
        stored = '{"street":"Main 1","city":"Bern","state":"","postalCode":"3000","country":"CH"}'
        state = get_suggestion_state(_field("address"), stored, {"suggested": ADDRESS})
        assert state.status is SuggestionStatus.APPLIED

    def test_address_always_inline(self):
        """Test address suggestions are always offered inline."""
        current = dict(ADDRESS, city="Basel")
        state = get_suggestion_state(_field("address"), current, {"suggested": ADDRESS})
        assert state.status is SuggestionStatus.AVAILABLE
        assert state.can_apply_inline is True

    def test_party_inline_only_when_blank(self):
        """Test party suggestions are inline only before name, street and city are set."""
        suggested = dict(ADDRESS, name="Acme AG")
        blank = get_suggestion_state(_field("party"), None, {"suggested": suggested})
        assert blank.can_apply_inline is True

        named = get_suggestion_state(_field("party"), {"name": "Other"}, {"suggested": suggested})
        assert named.status is SuggestionStatus.AVAILABLE
        assert named.can_apply_inline is False

    def test_party_compares_name(self):
        """Test the party name is one of the compared parts."""
        assert party_matches(dict(ADDRESS, name="A"), dict(ADDRESS, name="A"))
        assert not party_matches(dict(ADDRESS, name="A"), dict(ADDRESS, name="B"))

    def test_currency_amount_compared_as_string(self):
        """Test amounts compare by their string form."""
        assert currency_matches({"amount": "10", "currency": "CHF"}, {"amount": 10, "currency": "CHF"})
        assert not currency_matches({"amount": "10.0", "currency": "CHF"}, {"amount": 10, "currency": "CHF"})
        assert not currency_matches({"amount": 10, "currency": "EUR"}, {"amount": 10, "currency": "CHF"})

    def test_currency_inline_when_amount_empty(self):
        """Test currency suggestions are inline while no amount is entered."""
        state = get_suggestion_state(
            _field("currency"),
            '{"amount":"","currency":"CHF"}',
            {"suggested": {"amount": 5000, "currency": "CHF"}},
        )
        assert state.status is SuggestionStatus.AVAILABLE
        assert state.can_apply_inline is True


class TestApplySuggestion:
    """Tests for apply_suggestion."""

    def test_scalar(self):
        """Test the raw suggestion is returned for scalar fields."""
        assert apply_suggestion(_field("text"), {"suggested": "Retail"}) == "Retail"

    def test_composite_decoded(self):
        """Test composite suggestions stored as JSON are decoded."""
        value = apply_suggestion(_field("phone"), {"suggested": '{"countryCode":"+49","number":"301234"}'})
        assert value == {"countryCode": "+49", "number": "301234"}

    def test_nothing_to_apply(self):
        """Test missing suggestions give None."""
        assert apply_suggestion(_field("text"), {}) is None
        assert apply_suggestion(_field("text"), {"other": 1}) is None
        assert apply_suggestion(_field("address"), {"suggested": ""}) is None
        assert apply_suggestion(_field("text", enabled=False), {"suggested": "x"}) is None
