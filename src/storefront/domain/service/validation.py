"""Field-level validation for the checkout forms.

Every validator returns a mapping of field name to error message instead
of raising, so a caller can report all bad fields at once.  An empty
mapping means the form is valid.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Mapping

from storefront.domain.model.order import PAYMENT_METHODS

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[\d\s\-+()]+$", re.ASCII)
ZIP_CODE_RE = re.compile(r"^\d{4,8}$", re.ASCII)
DIGITS_RE = re.compile(r"[0-9]+")
EXPIRY_RE = re.compile(r"^(0[1-9]|1[0-2])/([0-9]{2})$")

MIN_CARD_DIGITS = 13
MAX_CARD_DIGITS = 19

# Card number prefixes of brands that print a 4-digit security code.
FOUR_DIGIT_CVV_PREFIXES = ("34", "37")

SHIPPING_FIELDS = (
    "firstName",
    "lastName",
    "email",
    "phone",
    "street",
    "city",
    "state",
    "zipCode",
)


# --- Shipping form -----------------------------------------------------------


def validate_shipping_field(name: str, value: str) -> str | None:
    """Return the error message for one shipping field, or None."""
    value = (value or "").strip()
    if name in ("firstName", "lastName"):
        return None if len(value) >= 2 else "Must be at least 2 characters"
    if name == "email":
        return None if EMAIL_RE.match(value) else "Invalid email"
    if name == "phone":
        return None if PHONE_RE.match(value) and len(value) >= 8 else "Invalid phone number"
    if name == "street":
        return None if len(value) >= 5 else "Address too short"
    if name == "city":
        return None if len(value) >= 2 else "Invalid city"
    if name == "state":
        return None if value else "Select a province"
    if name == "zipCode":
        return None if ZIP_CODE_RE.match(value) else "Invalid postal code"
    return None


def validate_shipping(form: Mapping[str, str]) -> dict[str, str]:
    """Validate every shipping field plus the chosen payment method."""
    errors: dict[str, str] = {}
    for name in SHIPPING_FIELDS:
        message = validate_shipping_field(name, form.get(name, ""))
        if message:
            errors[name] = message

    method = (form.get("paymentMethod") or "").strip()
    if not method:
        errors["paymentMethod"] = "Select a payment method"
    elif method not in PAYMENT_METHODS:
        errors["paymentMethod"] = f"Unknown payment method '{method}'"
    return errors


# --- Card form ---------------------------------------------------------------


def clean_card_number(number: str) -> str:
    return re.sub(r"[\s-]", "", number or "")


def luhn_checksum_ok(digits: str) -> bool:
    total = 0
    for position, char in enumerate(reversed(digits)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def is_valid_card_number(number: str) -> bool:
    """Digits only (spaces and dashes ignored), 13–19 long, Luhn-valid."""
    digits = clean_card_number(number)
    if not DIGITS_RE.fullmatch(digits):
        return False
    if not MIN_CARD_DIGITS <= len(digits) <= MAX_CARD_DIGITS:
        return False
    return luhn_checksum_ok(digits)


def is_valid_expiry(expiry: str, today: date | None = None) -> bool:
    """``MM/YY`` that is not earlier than the current month."""
    match = EXPIRY_RE.match((expiry or "").strip())
    if not match:
        return False
    today = today or date.today()
    month = int(match.group(1))
    year = 2000 + int(match.group(2))
    if year < today.year:
        return False
    if year == today.year and month < today.month:
        return False
    return True


def is_valid_cvv(cvv: str, card_number: str) -> bool:
    cvv = (cvv or "").strip()
    if not DIGITS_RE.fullmatch(cvv):
        return False
    if clean_card_number(card_number).startswith(FOUR_DIGIT_CVV_PREFIXES):
        return len(cvv) == 4
    return len(cvv) == 3


def validate_card(card: Mapping[str, str], today: date | None = None) -> dict[str, str]:
    number = card.get("cardNumber", "")
    errors: dict[str, str] = {}
    if not is_valid_card_number(number):
        errors["cardNumber"] = "Invalid card number"
    if not is_valid_expiry(card.get("cardExpiry", ""), today):
        errors["cardExpiry"] = "Invalid expiry date"
    if not is_valid_cvv(card.get("cardCvv", ""), number):
        errors["cardCvv"] = "Invalid CVV"
    if len((card.get("cardholderName") or "").strip()) < 2:
        errors["cardholderName"] = "Invalid cardholder name"
    return errors
