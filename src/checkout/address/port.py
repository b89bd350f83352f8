"""Postal lookup port: derive city and region from a postal code."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class PostalLocation:
    """Advisory location for a postal code."""

    city: str
    province: str
    country: str = "India"


class PostalLookupPort(ABC):
    @abstractmethod
    def lookup(self, postal_code: str) -> PostalLocation | None:
        """Return the location for ``postal_code`` or None when unknown."""
        ...
