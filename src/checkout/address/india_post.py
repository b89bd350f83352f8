"""India Post pincode adapter (api.postalpincode.in)."""

import requests
import structlog

from checkout.address.port import PostalLocation, PostalLookupPort
from shared.errors import NetworkError

logger = structlog.get_logger(__name__)

_DEFAULT_BASE_URL = "https://api.postalpincode.in"


class IndiaPostLookup(PostalLookupPort):
    def __init__(self, base_url: str = _DEFAULT_BASE_URL, timeout: int = 10) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()

    def lookup(self, postal_code: str) -> PostalLocation | None:
        try:
            response = self._session.get(f"{self.base_url}/pincode/{postal_code}", timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise NetworkError(f"Pincode lookup failed: {exc}") from exc

        first = data[0] if isinstance(data, list) and data else {}
        offices = first.get("PostOffice") or []
        if first.get("Status") != "Success" or not offices:
            logger.info("Pincode not found", postal_code=postal_code)
            return None

        office = offices[0]
        return PostalLocation(
            city=office.get("District") or office.get("Block") or "",
            province=office.get("State") or "",
        )
