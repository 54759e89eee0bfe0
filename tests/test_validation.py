"""Tests for field value validation."""

from smart_flow.models.field_definitions import FieldConfig
from smart_flow.validation import validate_field, validate_screen


def _field(field_type: str, required: bool = True, **kwargs) -> FieldConfig:
    return FieldConfig(name="value", label="Value", type=field_type, required=required, **kwargs)


class TestScalarValidation:
    """Tests for scalar field types."""

    def test_required_text(self):
        """Test required and optional empty text."""
        assert validate_field(_field("text"), "").error == "This field is required"
        assert validate_field(_field("text", required=False), None).valid
        assert validate_field(_field("textarea"), "Some notes").valid

    def test_email(self):
        """Test the email pattern."""
        assert validate_field(_field("email"), "ann@acme.ch").valid
        result = validate_field(_field("email"), "not-an-email")
        assert not result.valid
        assert result.error == "Please enter a valid email address"

    def test_url(self):
        """Test URLs with and without a scheme."""
        assert validate_field(_field("url"), "https://acme.ch").valid
        assert validate_field(_field("url"), "acme.ch").valid
        assert not validate_field(_field("url"), "not a url").valid

    def test_date(self):
        """Test ISO dates."""
        assert validate_field(_field("date"), "2024-01-15").valid
        assert not validate_field(_field("date"), "2024-02-30").valid
        assert not validate_field(_field("date"), "15.01.2024").valid

    def test_number(self):
        """Test numeric answers."""
        assert validate_field(_field("number"), 12).valid
        assert validate_field(_field("number"), "12.5").valid
        assert not validate_field(_field("number"), "abc").valid
        assert validate_field(_field("number"), 0).valid

    def test_percentage(self):
        """Test the 0 to 100 range."""
        assert validate_field(_field("percentage"), "50").valid
        assert validate_field(_field("percentage"), 150).error == "Percentage cannot exceed 100%"
        assert validate_field(_field("percentage"), -1).error == "Percentage cannot be negative"

    def test_checkbox(self):
        """Test required checkboxes must be ticked."""
        assert not validate_field(_field("checkbox"), False).valid
        assert validate_field(_field("checkbox"), True).valid
        assert validate_field(_field("checkbox", required=False), False).valid

    def test_select(self):
        """Test values must be among the options."""
        field = _field("select", options=["fixed", "open"])
        assert validate_field(field, "fixed").valid
        assert not validate_field(field, "temporary").valid

    def test_multiselect(self):
        """Test every selected value must be an option."""
        field = _field("multiselect", options=["a", "b", "c"])
        assert validate_field(field, ["a", "c"]).valid
        assert not validate_field(field, ["a", "x"]).valid
        assert validate_field(field, []).error == "Please select at least one option"


class TestCompositeValidation:
    """Tests for composite field types."""

    def test_phone(self):
        """Test digit counts of phone numbers."""
        assert validate_field(_field("phone"), '{"countryCode":"+41","number":"079 123 45 67"}').valid
        result = validate_field(_field("phone"), {"countryCode": "+41", "number": "123"})
        assert result.error == "Phone number is too short (minimum 7 digits)"
        assert validate_field(_field("phone", required=False), None).valid
        assert not validate_field(_field("phone"), None).valid

    def test_currency(self):
        """Test amount and currency checks."""
        assert validate_field(_field("currency"), {"amount": 5000, "currency": "CHF"}).valid
        assert validate_field(_field("currency"), {"amount": -5, "currency": "CHF"}).error == "Amount cannot be negative"
        assert validate_field(_field("currency"), {"amount": "", "currency": "CHF"}).error == "Amount is required"
        assert validate_field(_field("currency"), {"amount": 10, "currency": ""}).error == "Please select a currency"

    def test_address_parts(self):
        """Test required parts and postal code per country."""
        result = validate_field(
            _field("address"),
            {"street": "", "city": "Zurich", "postalCode": "80", "country": "CH"},
        )
        assert not result.valid
        assert result.field_errors == {
            "street": "Street address is required",
            "postalCode": "Invalid postal code format",
        }

    def test_address_postal_codes(self):
        """Test a few country formats."""
        base = {"street": "Main 1", "city": "X"}
        assert validate_field(_field("address"), dict(base, postalCode="8001", country="CH")).valid
        assert validate_field(_field("address"), dict(base, postalCode="10115", country="DE")).valid
        assert validate_field(_field("address"), dict(base, postalCode="12345-6789", country="US")).valid
        assert validate_field(_field("address"), dict(base, postalCode="SW1A 1AA", country="GB")).valid
        assert not validate_field(_field("address"), dict(base, postalCode="8001", country="DE")).valid

    def test_optional_address(self):
        """Test an unanswered optional address is accepted."""
        assert validate_field(_field("address", required=False), None).valid

    def test_party_needs_name(self):
        """Test parties require a name as well."""
        party = {"street": "Main 1", "city": "Bern", "postalCode": "3000", "country": "CH"}
        result = validate_field(_field("party"), party)
        assert result.field_errors == {"name": "Name is required"}
        assert validate_field(_field("party"), dict(party, name="Acme AG")).valid


class TestValidateScreen:
    """Tests for validate_screen."""

    def test_collects_errors(self):
        """Test errors from several fields, composite parts flattened."""
        fields = [
            FieldConfig(name="email", label="Email", type="email", required=True),
            FieldConfig(name="office", label="Office", type="address", required=True),
            FieldConfig(name="notes", label="Notes", type="textarea"),
        ]
        result = validate_screen(fields, {
            "email": "",
            "office": '{"street":"Main 1","city":"","country":"CH"}',
        })
        assert not result.is_valid
        assert result.error_count == 2
        assert result.to_error_dict() == {
            "email": ["Email is required"],
            "office.city": ["City is required"],
        }
        assert result.errors[0].error_type == "required"
        assert len(result.get_field_errors("office")) == 1

    def test_valid_screen(self):
        """Test a fully answered screen."""
        fields = [FieldConfig(name="name", label="Name", type="text", required=True)]
        result = validate_screen(fields, {"name": "Ann"})
        assert result.is_valid
        assert result.errors == []
