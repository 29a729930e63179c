"""Customer contact details captured at checkout."""

import re

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String, Text

from ordering.domain import ordering
from shared.validation import is_valid_email

MIN_PHONE_LENGTH = 8

_REQUIRED_FIELDS = {
    "name": "Name",
    "email": "Email",
    "phone": "Phone",
    "address": "Address",
}


def is_valid_phone(number: str) -> bool:
    if len(number) < MIN_PHONE_LENGTH:
        return False
    # Digits, spaces, hyphens, parentheses, dots and a leading +
    return bool(re.search(r"\d", number)) and bool(re.match(r"^\+?[\d\s\-().]+$", number))


@ordering.value_object
class CustomerDetails:
    """Who an order is for and where it goes.

    Every problem with the submitted fields is reported at once, keyed by
    field name.
    """

    name: String(max_length=255)
    email: String(max_length=254)
    phone: String(max_length=50)
    address: Text()

    @classmethod
    def create(cls, name="", email="", phone="", address="") -> "CustomerDetails":
        """Build details from raw form input, trimming surrounding whitespace."""
        return cls(
            name=(name or "").strip(),
            email=(email or "").strip(),
            phone=(phone or "").strip(),
            address=(address or "").strip(),
        )

    @invariant.post
    def contact_details_are_complete_and_well_formed(self):
        errors: dict[str, list[str]] = {}

        for field, label in _REQUIRED_FIELDS.items():
            if not getattr(self, field):
                errors[field] = [f"{label} is required"]

        if "email" not in errors and not is_valid_email(self.email):
            errors["email"] = ["Please enter a valid email address"]

        if "phone" not in errors and not is_valid_phone(self.phone):
            errors["phone"] = ["Please enter a valid phone number"]

        if errors:
            raise ValidationError(errors)
