"""Tests for buyer contact validation."""

import pytest
from checkout.session.contact import is_valid_email, normalize_phone, validate_contact
from protean.exceptions import ValidationError


class TestEmail:
    @pytest.mark.parametrize("email", ["asha@example.com", "a.b+c@shop.co.in"])
    def test_valid(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", ["", None, "asha", "asha@example", "as ha@example.com"])
    def test_invalid(self, email):
        assert not is_valid_email(email)


class TestPhone:
    @pytest.mark.parametrize(
        "raw, digits",
        [
            ("9876543210", "9876543210"),
            ("+91 98765 43210", "9876543210"),
            ("919876543210", "9876543210"),
            ("98765-43210", "9876543210"),
            (None, ""),
        ],
    )
    def test_normalize(self, raw, digits):
        assert normalize_phone(raw) == digits


class TestValidateContact:
    def test_cleaned_values(self):
        assert validate_contact("asha@example.com", "+91 98765 43210") == {
            "email": "asha@example.com",
            "phone": "9876543210",
        }

    def test_every_bad_field_reported(self):
        with pytest.raises(ValidationError) as exc:
            validate_contact("asha", "12345")
        assert set(exc.value.messages) == {"email", "phone"}

    def test_mobile_must_start_with_six_to_nine(self):
        with pytest.raises(ValidationError) as exc:
            validate_contact("asha@example.com", "5876543210")
        assert "phone" in exc.value.messages

    def test_phone_optional_when_not_required(self):
        assert validate_contact("asha@example.com", None, require_phone=False)["phone"] == ""

    def test_optional_phone_still_validated_when_given(self):
        with pytest.raises(ValidationError):
            validate_contact("asha@example.com", "123", require_phone=False)

    def test_required_phone_missing(self):
        with pytest.raises(ValidationError) as exc:
            validate_contact("asha@example.com", "")
        assert "phone" in exc.value.messages
