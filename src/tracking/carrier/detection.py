"""Carrier detection and public tracking URLs."""

import re
from enum import Enum


class Carrier(Enum):
    EKART = "EKART"
    DELHIVERY = "DELHIVERY"
    BLUEDART = "BLUEDART"
    DTDC = "DTDC"
    ECOM_EXPRESS = "ECOM_EXPRESS"
    XPRESSBEES = "XPRESSBEES"
    SHADOWFAX = "SHADOWFAX"
    INDIA_POST = "INDIA_POST"
    FEDEX = "FEDEX"
    DHL = "DHL"
    SHIPROCKET = "SHIPROCKET"
    MANUAL = "MANUAL"
    UNKNOWN = "UNKNOWN"


# Tested in order against the carrier name; first match wins
CARRIER_PATTERNS: list[tuple[Carrier, re.Pattern]] = [
    (Carrier.EKART, re.compile(r"ekart|flipkart|fmpp", re.IGNORECASE)),
    (Carrier.DELHIVERY, re.compile(r"delhivery", re.IGNORECASE)),
    (Carrier.BLUEDART, re.compile(r"bluedart|blue dart", re.IGNORECASE)),
    (Carrier.DTDC, re.compile(r"dtdc", re.IGNORECASE)),
    (Carrier.ECOM_EXPRESS, re.compile(r"ecom express|ecom", re.IGNORECASE)),
    (Carrier.XPRESSBEES, re.compile(r"xpressbees|xpress bees", re.IGNORECASE)),
    (Carrier.SHADOWFAX, re.compile(r"shadowfax", re.IGNORECASE)),
    (Carrier.INDIA_POST, re.compile(r"india post|speed post", re.IGNORECASE)),
    (Carrier.FEDEX, re.compile(r"fedex", re.IGNORECASE)),
    (Carrier.DHL, re.compile(r"dhl", re.IGNORECASE)),
    (Carrier.SHIPROCKET, re.compile(r"shiprocket", re.IGNORECASE)),
]

_EKART_PREFIXES = ("FMPP", "FMPR")
_DELHIVERY_NUMBER = re.compile(r"^\d{11}$")


def detect_carrier(company_name: str | None, tracking_number: str | None = "") -> Carrier:
    """Carrier from its name, else from tracking number conventions, else UNKNOWN."""
    if company_name:
        for carrier, pattern in CARRIER_PATTERNS:
            if pattern.search(company_name):
                return carrier

    number = (tracking_number or "").strip()
    if number.upper().startswith(_EKART_PREFIXES):
        return Carrier.EKART
    if _DELHIVERY_NUMBER.match(number):
        return Carrier.DELHIVERY
    return Carrier.UNKNOWN


_TRACKING_URLS = {
    Carrier.EKART: "https://ekartlogistics.com/track/{number}",
    Carrier.DELHIVERY: "https://www.delhivery.com/track/package/{number}",
    Carrier.BLUEDART: "https://www.bluedart.com/tracking/{number}",
    Carrier.DTDC: "https://www.dtdc.in/tracking/shipment-tracking.asp?strCnno={number}",
    Carrier.ECOM_EXPRESS: "https://ecomexpress.in/tracking/?awb_field={number}",
    Carrier.XPRESSBEES: "https://www.xpressbees.com/track?awbNo={number}",
    Carrier.INDIA_POST: "https://www.indiapost.gov.in/_layouts/15/dop.portal.tracking/trackconsignment.aspx",
    Carrier.FEDEX: "https://www.fedex.com/fedextrack/?trknbr={number}",
    Carrier.DHL: "https://www.dhl.com/in-en/home/tracking.html?tracking-id={number}",
}


def carrier_tracking_url(tracking_number: str, carrier_name: str | None = None) -> str | None:
    template = _TRACKING_URLS.get(detect_carrier(carrier_name, tracking_number))
    return template.format(number=tracking_number) if template else None
