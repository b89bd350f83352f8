"""Domain events for buyer cancellation requests and tracking overrides."""

from protean.fields import Boolean, DateTime, Identifier, String, Text

from tracking.domain import tracking


@tracking.event(part_of="CancellationRequest")
class CancellationRequested:
    """A buyer asked the seller to cancel an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    reason = Text()
    requested_at = DateTime(required=True)


@tracking.event(part_of="TrackingOverride")
class TrackingStatusOverridden:
    """Someone set a tracking number's delivery stage by hand."""

    __version__ = 1

    key = Identifier(required=True)
    status = String(required=True)
    is_cancelled = Boolean(default=False)
    set_at = DateTime(required=True)
