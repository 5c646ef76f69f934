"""Unit tests for checkout form validation."""

from datetime import date

import pytest

from storefront.domain.service.validation import (
    is_valid_card_number,
    is_valid_cvv,
    is_valid_expiry,
    validate_card,
    validate_shipping,
    validate_shipping_field,
)

TODAY = date(2025, 6, 15)

GOOD_SHIPPING = {
    "firstName": "Ana",
    "lastName": "García",
    "email": "ana@example.com",
    "phone": "+54 11 5555-1234",
    "street": "Av. Corrientes 1234",
    "city": "CABA",
    "state": "Buenos Aires",
    "zipCode": "1043",
    "paymentMethod": "credit-card",
}

GOOD_CARD = {
    "cardNumber": "4111 1111 1111 1111",
    "cardExpiry": "12/27",
    "cardCvv": "123",
    "cardholderName": "ANA GARCIA",
}


class TestShipping:

    def test_valid_form(self):
        assert validate_shipping(GOOD_SHIPPING) == {}

    def test_reports_every_bad_field(self):
        form = dict(GOOD_SHIPPING, firstName="A", email="nope", zipCode="12")
        errors = validate_shipping(form)
        assert set(errors) == {"firstName", "email", "zipCode"}

    def test_missing_payment_method(self):
        form = dict(GOOD_SHIPPING, paymentMethod="")
        assert validate_shipping(form) == {"paymentMethod": "Select a payment method"}

    def test_unknown_payment_method(self):
        form = dict(GOOD_SHIPPING, paymentMethod="barter")
        assert "paymentMethod" in validate_shipping(form)

    @pytest.mark.parametrize(
        "name, value, ok",
        [
            ("phone", "1234567", False),
            ("phone", "(011) 4444-5555", True),
            ("phone", "11-abc-5555", False),
            ("street", "Av 1", False),
            ("city", "X", False),
            ("state", "  ", False),
            ("zipCode", "12345678", True),
            ("zipCode", "C1043", False),
            ("email", "a@b", False),
        ],
    )
    def test_single_fields(self, name, value, ok):
        assert (validate_shipping_field(name, value) is None) == ok


class TestCardNumber:

    def test_luhn_valid(self):
        assert is_valid_card_number("4111111111111111")

    def test_luhn_invalid(self):
        assert not is_valid_card_number("4111111111111112")

    def test_spaces_and_dashes_ignored(self):
        assert is_valid_card_number("4111-1111 1111-1111")

    def test_too_short(self):
        assert not is_valid_card_number("411111111111")

    def test_letters_rejected(self):
        assert not is_valid_card_number("4111 1111 1111 111a")

    def test_non_ascii_digits_rejected(self):
        assert not is_valid_card_number("411111111111111²")
        assert not is_valid_card_number("٤111111111111111")

    def test_amex(self):
        assert is_valid_card_number("378282246310005")


class TestExpiry:

    @pytest.mark.parametrize(
        "expiry, ok",
        [
            ("06/25", True),  # current month still valid
            ("05/25", False),
            ("01/26", True),
            ("12/24", False),
            ("13/26", False),
            ("6/25", False),
            ("0625", False),
        ],
    )
    def test_expiry(self, expiry, ok):
        assert is_valid_expiry(expiry, TODAY) == ok


class TestCvv:

    def test_three_digits_for_visa(self):
        assert is_valid_cvv("123", "4111111111111111")
        assert not is_valid_cvv("1234", "4111111111111111")

    def test_four_digits_for_amex(self):
        assert is_valid_cvv("1234", "378282246310005")
        assert not is_valid_cvv("123", "378282246310005")

    def test_non_digits_rejected(self):
        assert not is_valid_cvv("12a", "4111111111111111")


class TestValidateCard:

    def test_valid_card(self):
        assert validate_card(GOOD_CARD, TODAY) == {}

    def test_unicode_digits_reported_inline(self):
        card = dict(GOOD_CARD, cardNumber="411111111111111²", cardCvv="12³")
        errors = validate_card(card, TODAY)
        assert errors["cardNumber"] == "Invalid card number"
        assert "cardCvv" in errors

    def test_collects_errors(self):
        card = {"cardNumber": "4111111111111112", "cardExpiry": "01/20", "cardCvv": "", "cardholderName": ""}
        assert set(validate_card(card, TODAY)) == {
            "cardNumber",
            "cardExpiry",
            "cardCvv",
            "cardholderName",
        }
