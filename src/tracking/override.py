"""TrackingOverride aggregate: the audit record of a hand-set delivery stage.

Lookups read the cache entry. This aggregate keeps each hand-set stage
on record after the cache entry has gone stale.
"""

from datetime import datetime

from protean.fields import Boolean, DateTime, Identifier, String

from tracking.cancellation.events import TrackingStatusOverridden
from tracking.domain import tracking
from tracking.status.stage import DeliveryStage


@tracking.aggregate
class TrackingOverride:
    key = Identifier(identifier=True, required=True)  # tracking number or order identifier
    status = String(required=True, max_length=30)
    is_cancelled = Boolean(default=False)
    set_at = DateTime(required=True)

    @classmethod
    def record(cls, key: str, stage: DeliveryStage, set_at: datetime) -> "TrackingOverride":
        override = cls(key=key, status=stage.status, set_at=set_at)
        override.change(stage, set_at)
        return override

    def change(self, stage: DeliveryStage, set_at: datetime) -> None:
        self.status = stage.status
        self.is_cancelled = stage is DeliveryStage.CANCELLED
        self.set_at = set_at
        self.raise_(
            TrackingStatusOverridden(
                key=self.key,
                status=self.status,
                is_cancelled=self.is_cancelled,
                set_at=set_at,
            )
        )

    @property
    def stage(self) -> DeliveryStage:
        return DeliveryStage.from_status(self.status)
