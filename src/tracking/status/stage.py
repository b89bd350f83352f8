"""Delivery stages.

``rank`` is the 0-5 ordinal used for timelines and "is this further
along" comparisons. FAILED and RTO share rank 4 with OUT_FOR_DELIVERY:
they are alternate outcomes at the same logistics depth, not steps past it.
"""

from enum import Enum


class DeliveryStage(Enum):
    CANCELLED = ("cancelled", 0, "Cancelled")
    ORDERED = ("ordered", 1, "Order Placed")
    PROCESSING = ("processing", 2, "Processing")
    SHIPPED = ("shipped", 3, "Shipped")
    IN_TRANSIT = ("in_transit", 3, "In Transit")
    OUT_FOR_DELIVERY = ("out_for_delivery", 4, "Out for Delivery")
    DELIVERED = ("delivered", 5, "Delivered")
    FAILED = ("failed", 4, "Delivery Failed")
    RTO = ("rto", 4, "Return to Origin")

    def __init__(self, status: str, rank: int, label: str) -> None:
        self.status = status
        self.rank = rank
        self.label = label

    @classmethod
    def from_status(cls, status: str) -> "DeliveryStage":
        """Look a stage up by its status key (``"in_transit"``) or member name."""
        key = (status or "").strip().lower()
        for stage in cls:
            if stage.status == key or stage.name.lower() == key:
                return stage
        raise ValueError(f"Unknown delivery stage: {status}")

    def is_further_than(self, other: "DeliveryStage") -> bool:
        return self.rank > other.rank

    def to_dict(self) -> dict:
        return {"status": self.status, "stage": self.rank, "label": self.label}
