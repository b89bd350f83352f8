"""Tracking overrides and cancellation requests: commands and handlers."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from tracking.cancellation.request import CancellationRequest
from tracking.domain import tracking
from tracking.orchestrator import get_tracking_orchestrator
from tracking.override import TrackingOverride
from tracking.status.stage import DeliveryStage


@tracking.command(part_of="TrackingOverride")
class SetManualTrackingStatus:
    """Force a tracking number's stage until the cache entry goes stale."""

    tracking_number = Identifier(required=True)
    status = String(required=True, max_length=30)


@tracking.command(part_of="TrackingOverride")
class MarkOrderCancelled:
    identifier = Identifier(required=True)


@tracking.command(part_of="CancellationRequest")
class RequestCancellation:
    """Record a buyer's cancellation request and alert the seller."""

    order_id = Identifier(required=True)
    order_number = String(required=True, max_length=50)
    reason = Text()
    customer_name = String(max_length=255)
    customer_email = String(max_length=255)
    order_total = String(max_length=50)
    shipping_address = Text()


@tracking.command_handler(part_of=TrackingOverride)
class TrackingOverrideHandler:
    @handle(SetManualTrackingStatus)
    def set_manual_status(self, command):
        try:
            stage = DeliveryStage.from_status(command.status)
        except ValueError as exc:
            raise ValidationError({"status": [str(exc)]}) from exc
        return self._override(command.tracking_number, stage)

    @handle(MarkOrderCancelled)
    def mark_cancelled(self, command):
        return self._override(command.identifier, DeliveryStage.CANCELLED)

    def _override(self, key: str, stage: DeliveryStage):
        orchestrator = get_tracking_orchestrator()
        result = orchestrator.set_manual_status(key, stage)
        now = orchestrator.clock.now()

        repo = current_domain.repository_for(TrackingOverride)
        try:
            override = repo.get(key)
            override.change(stage, now)
        except ObjectNotFoundError:
            override = TrackingOverride.record(key, stage, now)
        repo.add(override)
        return result


@tracking.command_handler(part_of=CancellationRequest)
class CancellationRequestHandler:
    @handle(RequestCancellation)
    def request_cancellation(self, command):
        receipt = get_tracking_orchestrator().submit_cancellation(
            command.order_id,
            command.order_number,
            reason=command.reason or "",
            details={
                "customer_name": command.customer_name,
                "customer_email": command.customer_email,
                "order_total": command.order_total,
                "shipping_address": command.shipping_address,
            },
        )

        repo = current_domain.repository_for(CancellationRequest)
        try:
            request = repo.get(receipt.request.order_id)
            request.renew(receipt.request.reason, receipt.request.requested_at)
        except ObjectNotFoundError:
            request = receipt.request
        repo.add(request)
        return receipt
