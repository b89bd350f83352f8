"""Tracking results: the normalised answer for one tracking number.

Records are serialised into the tracking cache as plain JSON, so the
dict form is the persisted format and must stay backward compatible.
"""

from dataclasses import dataclass, field

from tracking.status.stage import DeliveryStage


@dataclass(frozen=True)
class TrackingEvent:
    status: str
    location: str = ""
    time: str | None = None

    @classmethod
    def from_carrier(cls, event: dict) -> "TrackingEvent":
        return cls(
            status=event.get("status") or event.get("description") or "",
            location=event.get("location") or "",
            time=event.get("time") or event.get("timestamp") or event.get("date"),
        )

    def to_dict(self) -> dict:
        return {"status": self.status, "location": self.location, "time": self.time}


@dataclass(frozen=True)
class TrackingResult:
    success: bool
    carrier: str
    tracking_number: str
    stage: DeliveryStage
    last_update: str
    location: str = ""
    delivery_date: str | None = None
    events: list[TrackingEvent] = field(default_factory=list)
    is_fallback: bool = False
    is_manual: bool = False
    is_cancelled: bool = False

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "carrier": self.carrier,
            "tracking_number": self.tracking_number,
            "status": self.stage.to_dict(),
            "last_update": self.last_update,
            "location": self.location,
            "delivery_date": self.delivery_date,
            "events": [event.to_dict() for event in self.events],
            "is_fallback": self.is_fallback,
            "is_manual": self.is_manual,
            "is_cancelled": self.is_cancelled,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TrackingResult":
        status = data.get("status") or {}
        return cls(
            success=bool(data.get("success")),
            carrier=data.get("carrier") or "UNKNOWN",
            tracking_number=data.get("tracking_number") or "",
            stage=DeliveryStage.from_status(status.get("status") if isinstance(status, dict) else status),
            last_update=data.get("last_update") or "",
            location=data.get("location") or "",
            delivery_date=data.get("delivery_date"),
            events=[TrackingEvent.from_carrier(event) for event in data.get("events") or []],
            is_fallback=bool(data.get("is_fallback")),
            is_manual=bool(data.get("is_manual")),
            is_cancelled=bool(data.get("is_cancelled")),
        )
