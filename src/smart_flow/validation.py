"""
Field value validation.

Checks an answer against its field type before the flow moves on to the
next screen. Composite answers are decoded with the same codec renderers
use, and problems with single parts are reported per part.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any, Callable
from urllib.parse import urlparse

from smart_flow.codec import decode_composite
from smart_flow.formatting import parse_float
from smart_flow.models.field_definitions import FieldConfig, FieldType
from smart_flow.models.validation_result import (
    FieldValidationError,
    FieldValidationResult,
    ValidationResult,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

POSTAL_CODE_PATTERNS: dict[str, re.Pattern] = {
    "CH": re.compile(r"^\d{4}$"),
    "DE": re.compile(r"^\d{5}$"),
    "AT": re.compile(r"^\d{4}$"),
    "US": re.compile(r"^\d{5}(-\d{4})?$"),
    "GB": re.compile(r"^[A-Z]{1,2}\d[A-Z\d]?\s*\d[A-Z]{2}$", re.IGNORECASE),
    "FR": re.compile(r"^\d{5}$"),
}
DEFAULT_POSTAL_CODE_PATTERN = re.compile(r"^[\dA-Z\s-]{3,10}$", re.IGNORECASE)

MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15


def _blank(value: Any) -> bool:
    return value is None or value == "" or value is False


def _missing(required: bool, message: str) -> FieldValidationResult:
    return FieldValidationResult.fail(message) if required else FieldValidationResult.ok()


def _blank_part(value: Any) -> bool:
    return not value or (isinstance(value, str) and not value.strip())


def validate_text(value: Any, required: bool) -> FieldValidationResult:
    if _blank(value):
        return _missing(required, "This field is required")
    if not isinstance(value, str):
        return FieldValidationResult.fail("Invalid text format")
    return FieldValidationResult.ok()


def validate_email(value: Any, required: bool) -> FieldValidationResult:
    if _blank(value):
        return _missing(required, "Email is required")
    if not isinstance(value, str):
        return FieldValidationResult.fail("Invalid email format")
    if not EMAIL_PATTERN.match(value):
        return FieldValidationResult.fail("Please enter a valid email address")
    return FieldValidationResult.ok()


def validate_url(value: Any, required: bool) -> FieldValidationResult:
    if _blank(value):
        return _missing(required, "URL is required")
    if not isinstance(value, str):
        return FieldValidationResult.fail("Invalid URL format")

    candidate = value if value.startswith("http") else f"https://{value}"
    parsed = urlparse(candidate)
    if not parsed.netloc or " " in parsed.netloc:
        return FieldValidationResult.fail("Please enter a valid URL (e.g., https://example.com)")
    return FieldValidationResult.ok()


def validate_date(value: Any, required: bool) -> FieldValidationResult:
    if _blank(value):
        return _missing(required, "Date is required")
    if not isinstance(value, str):
        return FieldValidationResult.fail("Invalid date format")
    try:
        date.fromisoformat(value[:10])
    except ValueError:
        return FieldValidationResult.fail("Please enter a valid date")
    return FieldValidationResult.ok()


def validate_number(value: Any, required: bool) -> FieldValidationResult:
    if value is None or value == "":
        return _missing(required, "This field is required")
    if isinstance(value, bool) or parse_float(value) is None:
        return FieldValidationResult.fail("Please enter a valid number")
    return FieldValidationResult.ok()


def validate_percentage(value: Any, required: bool) -> FieldValidationResult:
    if value is None or value == "":
        return _missing(required, "Percentage is required")
    number = None if isinstance(value, bool) else parse_float(value)
    if number is None:
        return FieldValidationResult.fail("Please enter a valid number")
    if number < 0:
        return FieldValidationResult.fail("Percentage cannot be negative")
    if number > 100:
        return FieldValidationResult.fail("Percentage cannot exceed 100%")
    return FieldValidationResult.ok()


def validate_checkbox(value: Any, required: bool) -> FieldValidationResult:
    if required and not value:
        return FieldValidationResult.fail("This checkbox must be checked")
    return FieldValidationResult.ok()


def validate_select(value: Any, required: bool, options: Sequence[str]) -> FieldValidationResult:
    if _blank(value):
        return _missing(required, "Please select an option")
    if options and value not in options:
        return FieldValidationResult.fail("Please select a valid option")
    return FieldValidationResult.ok()


def validate_multiselect(value: Any, required: bool, options: Sequence[str]) -> FieldValidationResult:
    if _blank(value) or value == []:
        return _missing(required, "Please select at least one option")
    selected = value if isinstance(value, list) else [value]
    if options and any(item not in options for item in selected):
        return FieldValidationResult.fail("Please select valid options")
    return FieldValidationResult.ok()


def validate_phone(value: Any, required: bool) -> FieldValidationResult:
    phone = decode_composite(FieldType.PHONE, value)
    number = phone.get("number")
    if _blank_part(number):
        return _missing(required, "Phone number is required")

    digits = re.sub(r"\D", "", str(number))
    if len(digits) < MIN_PHONE_DIGITS:
        return FieldValidationResult.fail(
            f"Phone number is too short (minimum {MIN_PHONE_DIGITS} digits)"
        )
    if len(digits) > MAX_PHONE_DIGITS:
        return FieldValidationResult.fail(
            f"Phone number is too long (maximum {MAX_PHONE_DIGITS} digits)"
        )
    return FieldValidationResult.ok()


def validate_currency(value: Any, required: bool) -> FieldValidationResult:
    currency = decode_composite(FieldType.CURRENCY, value)
    amount = currency.get("amount")
    if amount is None or amount == "":
        return _missing(required, "Amount is required")

    number = None if isinstance(amount, bool) else parse_float(amount)
    if number is None:
        return FieldValidationResult.fail("Please enter a valid amount")
    if number < 0:
        return FieldValidationResult.fail("Amount cannot be negative")
    if not currency.get("currency"):
        return FieldValidationResult.fail("Please select a currency")
    return FieldValidationResult.ok()


def _check_postal_code(address: Mapping[str, Any], field_errors: dict[str, str]) -> None:
    postal_code = address.get("postalCode")
    country = address.get("country")
    if not postal_code or not country:
        return
    pattern = POSTAL_CODE_PATTERNS.get(str(country).upper(), DEFAULT_POSTAL_CODE_PATTERN)
    if not pattern.match(str(postal_code)):
        field_errors["postalCode"] = "Invalid postal code format"


def _check_address_parts(address: Mapping[str, Any], field_errors: dict[str, str]) -> None:
    if _blank_part(address.get("street")):
        field_errors["street"] = "Street address is required"
    if _blank_part(address.get("city")):
        field_errors["city"] = "City is required"
    if _blank_part(address.get("country")):
        field_errors["country"] = "Country is required"


def validate_address(value: Any, required: bool) -> FieldValidationResult:
    address = decode_composite(FieldType.ADDRESS, value)
    field_errors: dict[str, str] = {}
    if required:
        _check_address_parts(address, field_errors)
    _check_postal_code(address, field_errors)

    if field_errors:
        return FieldValidationResult.fail("Please complete all required address fields", field_errors)
    return FieldValidationResult.ok()


def validate_party(value: Any, required: bool) -> FieldValidationResult:
    party = decode_composite(FieldType.PARTY, value)
    field_errors: dict[str, str] = {}
    if required:
        if _blank_part(party.get("name")):
            field_errors["name"] = "Name is required"
        _check_address_parts(party, field_errors)
    _check_postal_code(party, field_errors)

    if field_errors:
        return FieldValidationResult.fail("Please complete all required fields", field_errors)
    return FieldValidationResult.ok()


_VALIDATORS: dict[FieldType, Callable[[Any, bool], FieldValidationResult]] = {
    FieldType.TEXT: validate_text,
    FieldType.TEXTAREA: validate_text,
    FieldType.EMAIL: validate_email,
    FieldType.URL: validate_url,
    FieldType.DATE: validate_date,
    FieldType.NUMBER: validate_number,
    FieldType.PERCENTAGE: validate_percentage,
    FieldType.CHECKBOX: validate_checkbox,
    FieldType.PHONE: validate_phone,
    FieldType.CURRENCY: validate_currency,
    FieldType.ADDRESS: validate_address,
    FieldType.PARTY: validate_party,
}


def validate_field(field: FieldConfig, value: Any) -> FieldValidationResult:
    """Validate one answer against its field configuration."""
    if field.type is FieldType.SELECT:
        return validate_select(value, field.required, field.options)
    if field.type is FieldType.MULTISELECT:
        return validate_multiselect(value, field.required, field.options)
    return _VALIDATORS[field.type](value, field.required)


def validate_screen(fields: Sequence[FieldConfig], form_data: Mapping[str, Any]) -> ValidationResult:
    """
    Validate the answers for a list of fields.

    Composite part errors are reported under ``<field>.<part>``.
    """
    errors: list[FieldValidationError] = []

    for field in fields:
        value = form_data.get(field.name)
        result = validate_field(field, value)
        if result.valid:
            continue

        if result.field_errors:
            for part, message in result.field_errors.items():
                errors.append(FieldValidationError(
                    field_name=f"{field.name}.{part}",
                    error_type="invalid_part",
                    message=message,
                ))
        else:
            errors.append(FieldValidationError(
                field_name=field.name,
                error_type="required" if value is None or value == "" else "invalid",
                message=result.error or "Invalid value",
                received=value,
            ))

    logger.debug("Validated %s fields, %s errors", len(fields), len(errors))
    return ValidationResult(is_valid=not errors, errors=errors)
