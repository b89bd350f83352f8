"""Postal lookup factory and address helpers.

get_postal_lookup() returns FakePostalLookup unless POSTAL_ADAPTER=india_post.
"""

import re

import structlog

from checkout.address.port import PostalLookupPort
from shared.config import get_settings
from shared.errors import NetworkError

logger = structlog.get_logger(__name__)

_PINCODE_RE = re.compile(r"^\d{6}$")

_lookup_instance: PostalLookupPort | None = None


def get_postal_lookup() -> PostalLookupPort:
    global _lookup_instance
    if _lookup_instance is None:
        adapter = get_settings().adapter("postal")
        if adapter == "fake":
            from checkout.address.fake_lookup import FakePostalLookup

            _lookup_instance = FakePostalLookup()
        elif adapter == "india_post":
            from checkout.address.india_post import IndiaPostLookup

            _lookup_instance = IndiaPostLookup()
        else:
            raise ValueError(f"Unknown postal adapter: {adapter}")
    return _lookup_instance


def set_postal_lookup(lookup: PostalLookupPort) -> None:
    global _lookup_instance
    _lookup_instance = lookup


def reset_postal_lookup() -> None:
    global _lookup_instance
    _lookup_instance = None


def lookup_postal_code(postal_code: str, lookup: PostalLookupPort | None = None):
    """Location for a six digit Indian PIN, or None when malformed or unknown."""
    postal_code = (postal_code or "").strip()
    if not _PINCODE_RE.match(postal_code):
        return None
    return (lookup or get_postal_lookup()).lookup(postal_code)


def autofill_address(address, lookup: PostalLookupPort | None = None):
    """Return a copy of ``address`` with city and region derived from its PIN.

    Only Indian addresses with a well-formed six digit PIN are looked up.
    Lookup failures leave the address unchanged. Fields the buyer already
    filled in are overwritten, since the buyer may edit them again.
    """
    from checkout.address.address import Address, is_india

    if not is_india(address.country) or not _PINCODE_RE.match(address.zip or ""):
        return address

    lookup = lookup or get_postal_lookup()
    try:
        location = lookup.lookup(address.zip)
    except NetworkError as exc:
        logger.warning("Could not fetch location for pincode", postal_code=address.zip, error=str(exc))
        return address

    if location is None:
        return address

    values = address.to_dict()
    values["city"] = location.city or values.get("city", "")
    values["province"] = location.province or values.get("province", "")
    return Address(**values)
