"""Address value object shared by checkout sessions and platform orders."""

import re

import structlog
from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from checkout.domain import checkout

logger = structlog.get_logger(__name__)

INDIA_NAMES = {"india", "in"}
_PINCODE_RE = re.compile(r"^\d{6}$")


def is_india(country: str | None) -> bool:
    return (country or "").strip().lower() in INDIA_NAMES


@checkout.value_object
class Address:
    """A postal address as entered by the buyer.

    When the country is India the postal code must be exactly six digits;
    city and region may be derived from it by a postal lookup, but derived
    values are only suggestions and stay editable.
    """

    first_name: String(max_length=100, default="")
    last_name: String(max_length=100, default="")
    address1: String(max_length=255, default="")
    address2: String(max_length=255, default="")
    city: String(max_length=100, default="")
    province: String(max_length=100, default="")
    province_code: String(max_length=10, default="")
    zip: String(max_length=20, default="")
    country: String(max_length=100, default="India")
    phone: String(max_length=20, default="")

    @invariant.post
    def indian_postal_code_has_six_digits(self):
        if is_india(self.country) and not _PINCODE_RE.match(self.zip or ""):
            raise ValidationError({"zip": ["Valid 6-digit PIN required"]})

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def one_line(self) -> str:
        parts = [self.address1, self.address2, self.city, self.province]
        text = ", ".join(p for p in parts if p)
        return f"{text} - {self.zip}" if self.zip else text

    def to_storefront_input(self) -> dict:
        """MailingAddressInput shape used by the Storefront API."""
        return {
            "firstName": self.first_name or "",
            "lastName": self.last_name or "",
            "address1": self.address1 or "",
            "address2": self.address2 or "",
            "city": self.city or "",
            "province": self.province or "",
            "country": self.country or "India",
            "zip": self.zip or "",
            "phone": self.phone or "",
        }

    @classmethod
    def from_storefront(cls, data: dict | None) -> "Address | None":
        if not data:
            return None
        try:
            return cls(
                first_name=data.get("firstName") or "",
                last_name=data.get("lastName") or "",
                address1=data.get("address1") or "",
                address2=data.get("address2") or "",
                city=data.get("city") or "",
                province=data.get("province") or "",
                province_code=data.get("provinceCode") or "",
                zip=data.get("zip") or "",
                country=data.get("country") or "India",
                phone=data.get("phone") or "",
            )
        except ValidationError as exc:
            # A half-filled address on the platform side is not our invariant to enforce
            logger.info("Ignoring incomplete platform address", errors=exc.messages)
            return None
