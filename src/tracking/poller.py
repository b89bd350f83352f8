"""Time-triggered tracking refresh.

Polls every watched tracking number on a fixed interval. A poll may
overlap a manual refresh of the same number; both are reads through the
cache, so the overlap costs at most one extra carrier call.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from tracking.cache.records import TrackingResult
from tracking.orchestrator import DeliveryTrackingOrchestrator, get_tracking_orchestrator

logger = structlog.get_logger(__name__)

DEFAULT_POLL_INTERVAL = 30


@dataclass(frozen=True)
class WatchedShipment:
    tracking_number: str
    carrier_hint: str | None = None
    fallback_status: str | None = ""


class TrackingPoller:
    def __init__(
        self,
        orchestrator: DeliveryTrackingOrchestrator | None = None,
        interval: float | None = None,
        on_update: Callable[[TrackingResult], None] | None = None,
    ) -> None:
        self.orchestrator = orchestrator or get_tracking_orchestrator()
        self.interval = interval if interval is not None else self.orchestrator.settings.tracking_poll_interval
        self.on_update = on_update
        self._watched: dict[str, WatchedShipment] = {}
        self._latest: dict[str, TrackingResult] = {}
        self._stopped = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def watch(self, tracking_number: str, carrier_hint: str | None = None, fallback_status: str | None = "") -> None:
        self._watched[tracking_number] = WatchedShipment(tracking_number, carrier_hint, fallback_status)

    def unwatch(self, tracking_number: str) -> None:
        self._watched.pop(tracking_number, None)
        self._latest.pop(tracking_number, None)

    def latest(self, tracking_number: str) -> TrackingResult | None:
        return self._latest.get(tracking_number)

    async def poll_once(self) -> dict[str, TrackingResult]:
        """Refresh every watched shipment once, sequentially."""
        results = {}
        for shipment in list(self._watched.values()):
            result = await asyncio.to_thread(
                self.orchestrator.get_live_status,
                shipment.tracking_number,
                shipment.carrier_hint,
                shipment.fallback_status,
            )
            previous = self._latest.get(shipment.tracking_number)
            self._latest[shipment.tracking_number] = result
            results[shipment.tracking_number] = result
            if self.on_update and (previous is None or previous.stage is not result.stage):
                self.on_update(result)
        return results

    async def _run(self) -> None:
        logger.info("Tracking poller started", interval=self.interval, watched=len(self._watched))
        while not self._stopped.is_set():
            await self.poll_once()
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.interval)
            except TimeoutError:
                continue
        logger.info("Tracking poller stopped")

    def start(self) -> asyncio.Task:
        if not self.running:
            self._stopped.clear()
            self._task = asyncio.create_task(self._run())
        return self._task

    async def stop(self) -> None:
        self._stopped.set()
        if self._task is not None:
            await self._task
            self._task = None
