"""
Validation utilities for console forms.
Provides field rules, the patterns the forms check against, and helpers
that turn a draft into per-field error messages.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from housing_admin.utils.exceptions import ValidationError


CREATE = "create"
EDIT = "edit"
BOTH = frozenset({CREATE, EDIT})


class ValidationUtils:
    """
    Utility class for common validation operations.
    Checks return an error message, or None when the value is acceptable.
    """

    # Regular expressions for validation
    EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
    PHONE_PATTERN = re.compile(r"^[0-9]{10,15}$")

    MIN_PASSWORD_LENGTH = 6

    @staticmethod
    def is_blank(value: Any) -> bool:
        """True for None, empty/whitespace strings and empty collections."""
        if value is None:
            return True
        if isinstance(value, str):
            return not value.strip()
        if isinstance(value, (list, tuple, set, dict)):
            return len(value) == 0
        return False

    @staticmethod
    def is_valid_email(value: Any) -> bool:
        return isinstance(value, str) and bool(ValidationUtils.EMAIL_PATTERN.match(value.strip()))

    @staticmethod
    def is_valid_phone(value: Any) -> bool:
        if value is None:
            return False
        return bool(ValidationUtils.PHONE_PATTERN.match(str(value).strip()))

    @staticmethod
    def parse_json_object(raw: Optional[str], field_name: str = "payload") -> Dict[str, Any]:
        """
        Parse the JSON form part of a multipart request.

        Raises:
            ValidationError: If the text is not a JSON object
        """
        if raw is None or not raw.strip():
            return {}
        try:
            value = json.loads(raw)
        except ValueError:
            value = None
        if not isinstance(value, dict):
            raise ValidationError(
                "Invalid form payload",
                field_errors=[{"field": field_name, "message": "Must be a JSON object"}]
            )
        return value

    @staticmethod
    def to_number(value: Any) -> Optional[float]:
        """Parse a form value as a number; None when it is not numeric."""
        if isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None


Check = Callable[[Any, Mapping[str, Any]], Optional[str]]


@dataclass(frozen=True)
class FieldRule:
    """
    One check on one draft field.

    `check` receives the field value and the whole draft and returns an error
    message or None. `modes` limits the rule to create forms, edit forms, or both.
    """

    check: Check
    modes: FrozenSet[str] = field(default=BOTH)

    def applies_to(self, mode: str) -> bool:
        return mode in self.modes


def _modes(on: Optional[Iterable[str]]) -> FrozenSet[str]:
    return frozenset(on) if on is not None else BOTH


def required(message: str = "This field is required", on: Optional[Iterable[str]] = None) -> FieldRule:
    """Value must be present and non-blank."""
    def check(value, draft):
        return message if ValidationUtils.is_blank(value) else None
    return FieldRule(check, _modes(on))


def email(message: str = "Please enter a valid email", on: Optional[Iterable[str]] = None) -> FieldRule:
    """Value must look like an email address; blank values are left to `required`."""
    def check(value, draft):
        if ValidationUtils.is_blank(value):
            return None
        return None if ValidationUtils.is_valid_email(value) else message
    return FieldRule(check, _modes(on))


def phone(message: str = "Please enter a valid phone number (10-15 digits)",
          on: Optional[Iterable[str]] = None) -> FieldRule:
    """Value must be 10 to 15 digits; blank values are left to `required`."""
    def check(value, draft):
        if ValidationUtils.is_blank(value):
            return None
        return None if ValidationUtils.is_valid_phone(value) else message
    return FieldRule(check, _modes(on))


def min_length(
    length: int,
    message: Optional[str] = None,
    allow_blank: bool = False,
    on: Optional[Iterable[str]] = None
) -> FieldRule:
    """
    Value must have at least `length` characters.

    With `allow_blank` an empty value passes; edit forms use this for
    write-only fields the admin may leave untouched.
    """
    message = message or f"Must be at least {length} characters"

    def check(value, draft):
        if ValidationUtils.is_blank(value):
            return None if allow_blank else message
        return None if len(str(value)) >= length else message
    return FieldRule(check, _modes(on))


def matches(other: str, message: str = "Passwords do not match", on: Optional[Iterable[str]] = None) -> FieldRule:
    """Value must equal the draft's `other` field."""
    def check(value, draft):
        if ValidationUtils.is_blank(value) and ValidationUtils.is_blank(draft.get(other)):
            return None
        return None if value == draft.get(other) else message
    return FieldRule(check, _modes(on))


def one_of(options: Sequence[Any], message: Optional[str] = None, on: Optional[Iterable[str]] = None) -> FieldRule:
    """Value must be one of `options` (enum members compare by value)."""
    allowed = [getattr(option, "value", option) for option in options]
    message = message or f"Must be one of: {', '.join(str(a) for a in allowed)}"

    def check(value, draft):
        if ValidationUtils.is_blank(value):
            return None
        return None if getattr(value, "value", value) in allowed else message
    return FieldRule(check, _modes(on))


def number(
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    message: Optional[str] = None,
    on: Optional[Iterable[str]] = None
) -> FieldRule:
    """Value must be numeric and inside the given bounds; blank values pass."""
    def check(value, draft):
        if ValidationUtils.is_blank(value):
            return None
        parsed = ValidationUtils.to_number(value)
        if parsed is None:
            return message or "Must be a number"
        if minimum is not None and parsed < minimum:
            return message or f"Must be at least {minimum:g}"
        if maximum is not None and parsed > maximum:
            return message or f"Cannot exceed {maximum:g}"
        return None
    return FieldRule(check, _modes(on))


Rules = Mapping[str, Sequence[FieldRule]]


def validate_fields(draft: Mapping[str, Any], rules: Rules, mode: str) -> Dict[str, str]:
    """
    Run every rule that applies to `mode` against the draft.

    Args:
        draft: Field values keyed by attribute name
        rules: Rules per field name
        mode: CREATE or EDIT

    Returns:
        First error message per invalid field; empty when the draft is valid
    """
    errors: Dict[str, str] = {}
    for name, field_rules in rules.items():
        value = draft.get(name)
        for rule in field_rules:
            if not rule.applies_to(mode):
                continue
            message = rule.check(value, draft)
            if message:
                errors[name] = message
                break
    return errors


def field_errors_list(errors: Mapping[str, str]) -> List[Dict[str, str]]:
    """Convert a field -> message mapping to the error-details list shape."""
    return [{"field": name, "message": message} for name, message in errors.items()]


def raise_for_errors(errors: Mapping[str, str], detail: str = "Form validation failed") -> None:
    """
    Raise a ValidationError when any field failed.

    Raises:
        ValidationError: With one field error per invalid field
    """
    if errors:
        raise ValidationError(detail, field_errors=field_errors_list(errors))
