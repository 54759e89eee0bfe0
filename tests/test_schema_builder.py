"""Tests for output schema derivation."""

import json

import pytest

from smart_flow.exceptions import InvalidOutputSchemaError
from smart_flow.models.field_definitions import FieldConfig, Screen
from smart_flow.models.schema_output import SchemaShape
from smart_flow.schema_builder import (
    build_output_schema,
    convert_selected_fields_to_schema,
    field_type_to_schema_type,
    load_output_schema,
    parse_schema_to_selected_fields,
    validate_output_schema,
)


@pytest.fixture
def screens() -> list[Screen]:
    return [
        Screen(
            id="details",
            order=3,
            fields=[
                FieldConfig(name="contractType", label="Contract type", type="select", options=["fixed", "open"]),
                FieldConfig(name="salary", label="Salary", type="currency"),
            ],
        ),
        Screen(
            id="company",
            order=2,
            fields=[
                FieldConfig(name="companyName", label="Company name", type="text", required=False),
                FieldConfig(name="companyAddress", label="Company address", type="address"),
            ],
        ),
    ]


class TestFieldTypeToSchemaType:
    """Tests for field_type_to_schema_type."""

    def test_string_types(self):
        """Test plain string types."""
        for field_type in ("text", "email", "url", "textarea", "date"):
            assert field_type_to_schema_type(field_type) == SchemaShape(type="string")

    def test_number_and_boolean(self):
        """Test numeric and boolean types."""
        assert field_type_to_schema_type("number").type == "number"
        assert field_type_to_schema_type("percentage").type == "number"
        assert field_type_to_schema_type("checkbox").to_json_schema() == {"type": "boolean"}

    def test_select_enum_only_with_options(self):
        """Test enum is emitted only for non-empty options."""
        assert field_type_to_schema_type("select", ["a", "b"]).to_json_schema() == {"type": "string", "enum": ["a", "b"]}
        assert field_type_to_schema_type("multiselect", []).to_json_schema() == {"type": "string"}
        assert field_type_to_schema_type("select").enum is None

    def test_currency(self):
        """Test the currency shape."""
        assert field_type_to_schema_type("currency").to_json_schema() == {
            "type": "object",
            "properties": {"amount": {"type": "number"}, "currency": {"type": "string"}},
            "required": ["amount", "currency"],
        }

    def test_party_and_address(self):
        """Test party is address plus name."""
        party = field_type_to_schema_type("party")
        address = field_type_to_schema_type("address")
        assert party.required == ["name", "street", "city", "state", "postalCode", "country"]
        assert address.required == ["street", "city", "state", "postalCode", "country"]
        assert all(p == {"type": "string"} for p in party.properties.values())

    def test_phone(self):
        """Test the phone shape."""
        assert field_type_to_schema_type("phone").required == ["countryCode", "number"]

    def test_unrecognized(self):
        """Test unknown types map to string."""
        assert field_type_to_schema_type("signature").to_json_schema() == {"type": "string"}


class TestConvertSelectedFields:
    """Tests for building the output schema."""

    def test_exact_text(self):
        """Test the serialized form uses two-space indentation."""
        screen = Screen(id="s", order=1, fields=[FieldConfig(name="email", label="Email", type="email")])
        text = convert_selected_fields_to_schema({"email"}, [screen])
        assert text == (
            '{\n'
            '  "type": "object",\n'
            '  "properties": {\n'
            '    "email": {\n'
            '      "type": "string",\n'
            '      "description": "Email"\n'
            '    }\n'
            '  },\n'
            '  "required": [\n'
            '    "email"\n'
            '  ]\n'
            '}'
        )

    def test_screens_in_order(self, screens):
        """Test properties follow screen order, then field order."""
        schema = build_output_schema({"salary", "companyName", "contractType"}, screens)
        assert list(schema.properties) == ["companyName", "contractType", "salary"]
        assert schema.required == ["companyName", "contractType", "salary"]

    def test_selected_fields_always_required(self, screens):
        """Test optional source fields are still required in the output."""
        schema = build_output_schema({"companyName"}, screens)
        assert schema.required == ["companyName"]

    def test_property_shape(self, screens):
        """Test a composite property carries label and nested shape."""
        schema = json.loads(convert_selected_fields_to_schema({"companyAddress", "contractType"}, screens))
        address = schema["properties"]["companyAddress"]
        assert address["type"] == "object"
        assert address["description"] == "Company address"
        assert "country" in address["properties"]
        assert schema["properties"]["contractType"]["enum"] == ["fixed", "open"]

    def test_unknown_names_ignored(self, screens):
        """Test selected names without a field produce nothing."""
        schema = build_output_schema({"ghost"}, screens)
        assert schema.properties == {}
        assert schema.required == []

    def test_duplicate_names_required_once(self):
        """Test a name used on two screens is listed once."""
        first = Screen(id="a", order=1, fields=[FieldConfig(name="x", label="First", type="text")])
        second = Screen(id="b", order=2, fields=[FieldConfig(name="x", label="Second", type="number")])
        schema = build_output_schema({"x"}, [first, second])
        assert schema.required == ["x"]
        assert schema.properties["x"]["description"] == "Second"

    def test_round_trip(self, screens):
        """Test the selection is recovered from the generated text."""
        selected = {"companyName", "companyAddress", "salary"}
        text = convert_selected_fields_to_schema(selected, screens)
        assert parse_schema_to_selected_fields(text) == selected


class TestParseSchema:
    """Tests for reading schema text."""

    def test_invalid_json(self):
        """Test unparseable text selects nothing without raising."""
        assert parse_schema_to_selected_fields("{not json") == set()
        assert parse_schema_to_selected_fields(None) == set()

    def test_wrong_shape(self):
        """Test non-object schemas select nothing."""
        assert parse_schema_to_selected_fields('{"type": "array", "properties": {"a": {}}}') == set()
        assert parse_schema_to_selected_fields('{"type": "object"}') == set()
        assert parse_schema_to_selected_fields("[1, 2]") == set()

    def test_load_output_schema(self):
        """Test strict loading for the code editor."""
        assert load_output_schema("   ") == {}
        assert load_output_schema('{"type": "object"}') == {"type": "object"}
        with pytest.raises(InvalidOutputSchemaError):
            load_output_schema("{oops")
        with pytest.raises(InvalidOutputSchemaError):
            load_output_schema("[]")

    def test_deeply_nested_text(self):
        """Test text nested past the recursion limit is rejected, not raised."""
        nested = "[" * 100000
        assert parse_schema_to_selected_fields(nested) == set()
        with pytest.raises(InvalidOutputSchemaError):
            load_output_schema(nested)


class TestValidateOutputSchema:
    """Tests for structural schema checks."""

    def test_valid(self):
        """Test a generated schema passes."""
        schema = {"type": "object", "properties": {"a": {"type": "string"}}, "required": ["a"]}
        result = validate_output_schema(schema)
        assert result.is_valid
        assert result.errors == []

    def test_problems(self):
        """Test common hand-editing mistakes."""
        schema = {"type": "array", "properties": {"a": {"type": "text"}, "b": {}}, "required": ["c"]}
        result = validate_output_schema(schema)
        assert not result.is_valid
        assert "Root schema type must be 'object'" in result.errors
        assert "Property 'a' has invalid type: text" in result.errors
        assert "Required field 'c' not in properties" in result.errors
        assert "Property 'b' has no type defined" in result.warnings

    def test_empty_properties_warns(self):
        """Test an object with no properties is valid but warned about."""
        result = validate_output_schema({"type": "object", "properties": {}})
        assert result.is_valid
        assert result.warnings == ["Schema has no properties defined"]
