"""Carrier tracking port.

Live carrier lookups are best effort. An adapter returns None when it has
nothing to say (unsupported carrier, endpoint unreachable, unknown
number); that is a normal outcome and never an exception.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from tracking.carrier.detection import Carrier


@dataclass(frozen=True)
class CarrierReport:
    """A carrier's raw answer, before normalisation."""

    current_status: str
    status_details: str = ""
    last_update: str | None = None
    current_location: str = ""
    delivery_date: str | None = None
    events: list[dict] = field(default_factory=list)


class CarrierTrackingPort(ABC):
    @abstractmethod
    def fetch(self, tracking_number: str, carrier: Carrier) -> CarrierReport | None:
        """Latest carrier report for ``tracking_number``, or None."""
        ...
