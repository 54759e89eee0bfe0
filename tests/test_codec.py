"""Tests for the composite value codec."""

import json

import pytest

from smart_flow.codec import (
    EmptyRaw,
    JsonStringRaw,
    StructuredRaw,
    UnsupportedRaw,
    classify_raw,
    composite_default,
    decode_composite,
    encode_composite_value,
    parse_composite_value,
)
from smart_flow.models.composite_values import DEFAULT_ADDRESS, DEFAULT_PHONE


class TestClassifyRaw:
    """Tests for classify_raw."""

    def test_empty_values(self):
        """Test falsy inputs are empty."""
        for raw in (None, "", False, 0, 0.0):
            assert isinstance(classify_raw(raw), EmptyRaw)

    def test_empty_mapping_is_structured(self):
        """Test an empty mapping still counts as a stored value."""
        assert classify_raw({}) == StructuredRaw({})

    def test_other_kinds(self):
        """Test strings and unsupported values."""
        assert classify_raw('{"a":1}') == JsonStringRaw('{"a":1}')
        assert isinstance(classify_raw([1]), UnsupportedRaw)
        assert isinstance(classify_raw(5), UnsupportedRaw)


class TestParseCompositeValue:
    """Tests for parse_composite_value."""

    def test_json_string_not_merged(self):
        """Test a partial JSON value is returned without backfilling."""
        value = parse_composite_value('{"street":"Main"}', DEFAULT_ADDRESS)
        assert value == {"street": "Main"}
        assert "city" not in value

    def test_invalid_json_gives_default(self):
        """Test parse failures fall back to the default, unchanged."""
        value = parse_composite_value("not json", DEFAULT_PHONE)
        assert value is DEFAULT_PHONE
        assert dict(value) == {"countryCode": "+41", "number": ""}

    def test_mapping_returned_as_is(self):
        """Test a stored mapping is trusted without validation."""
        raw = {"number": "123", "unexpected": True}
        assert parse_composite_value(raw, DEFAULT_PHONE) is raw

    def test_empty_gives_default(self):
        """Test empty inputs give the default."""
        assert parse_composite_value(None, DEFAULT_PHONE) is DEFAULT_PHONE
        assert parse_composite_value("", DEFAULT_PHONE) is DEFAULT_PHONE

    def test_non_object_json_gives_default(self):
        """Test JSON that is not an object falls back to the default."""
        assert parse_composite_value("[1, 2]", DEFAULT_PHONE) is DEFAULT_PHONE
        assert parse_composite_value('"text"', DEFAULT_PHONE) is DEFAULT_PHONE

    def test_unsupported_gives_default(self):
        """Test numbers and lists fall back to the default."""
        assert parse_composite_value(42, DEFAULT_PHONE) is DEFAULT_PHONE
        assert parse_composite_value(["x"], DEFAULT_PHONE) is DEFAULT_PHONE

    def test_deeply_nested_json_gives_default(self):
        """Test text nested past the recursion limit falls back to the default."""
        assert parse_composite_value("[" * 100000, DEFAULT_PHONE) is DEFAULT_PHONE
        assert parse_composite_value('{"a":' * 100000, DEFAULT_PHONE) is DEFAULT_PHONE


class TestCompositeDefaults:
    """Tests for per-type defaults."""

    def test_each_type_has_its_own_default(self):
        """Test the canonical defaults."""
        assert composite_default("address")["country"] == "CH"
        assert composite_default("party") == {
            "name": "", "street": "", "city": "", "state": "", "postalCode": "", "country": "",
        }
        assert composite_default("phone") == {"countryCode": "+41", "number": ""}
        assert composite_default("currency") == {"amount": "", "currency": "CHF"}

    def test_default_is_a_copy(self):
        """Test callers can mutate the returned default."""
        default = composite_default("address")
        default["country"] = "DE"
        assert composite_default("address")["country"] == "CH"

    def test_currency_locale(self):
        """Test the currency default follows the locale."""
        assert composite_default("currency", "en-US")["currency"] == "USD"
        assert composite_default("currency", "de-DE")["currency"] == "EUR"

    def test_non_composite_rejected(self):
        """Test scalar types have no composite default."""
        with pytest.raises(ValueError):
            composite_default("text")


class TestDecodeComposite:
    """Tests for decode_composite and encode_composite_value."""

    def test_decode_uses_type_default(self):
        """Test malformed input decodes to the type's own default."""
        assert decode_composite("address", "{broken")["country"] == "CH"
        assert decode_composite("party", None)["country"] == ""

    def test_decode_json(self):
        """Test a stored JSON value decodes to a dict."""
        stored = encode_composite_value({"amount": 100, "currency": "EUR"})
        assert decode_composite("currency", stored) == {"amount": 100, "currency": "EUR"}

    def test_encode_is_compact(self):
        """Test stored values are compact JSON and keep unicode."""
        encoded = encode_composite_value({"city": "Zürich"})
        assert encoded == '{"city":"Zürich"}'
        assert json.loads(encoded) == {"city": "Zürich"}
