# apigestion/services/scheduler_service.py
"""
Alert scheduler: runs the recurring and queen alert sweeps on a fixed cadence.

Constructed once by the app startup routine and kept on app.state.
start() runs a sweep cycle immediately and then every interval_seconds on the
running event loop. stop() prevents future ticks; a sweep already in progress
is left to finish. A failing cycle is logged and the next tick runs normally.
"""

import asyncio
from typing import Callable, Optional, Set
from sqlalchemy.orm import Session
from apigestion.config import settings
from apigestion.database import SessionLocal
from apigestion.services.alert_service import AlertService
from apigestion.utils.logger import get_logger

logger = get_logger(__name__)


class AlertScheduler:
    def __init__(
        self,
        alert_service: AlertService,
        session_factory: Callable[[], Session] = SessionLocal,
        interval_seconds: Optional[float] = None,
    ):
        self.alert_service = alert_service
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds or settings.ALERT_SWEEP_INTERVAL_SECONDS
        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._running = False
        # stopped loops still finishing their last sweep
        self._draining: Set[asyncio.Task] = set()

    def start(self):
        """Start the sweep loop. Calling it again while running only logs a notice."""
        if self._running:
            logger.info("⏰ Alert scheduler already running")
            return

        logger.info(f"⏰ Starting alert scheduler (every {self.interval_seconds}s)")
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(self._stop_event), name="alert-scheduler")
        self._running = True

    def stop(self):
        """Stop future ticks. Safe to call when already stopped."""
        if self._stop_event is not None:
            self._stop_event.set()
        self._stop_event = None
        if self._task is not None and not self._task.done():
            self._draining.add(self._task)
            self._task.add_done_callback(self._draining.discard)
        self._task = None
        if self._running:
            logger.info("🛑 Alert scheduler stopped")
        self._running = False

    def is_active(self) -> bool:
        return self._running

    async def force_sweep(self) -> int:
        """Run one sweep cycle now, whatever the scheduler state. Returns the number of alerts generated."""
        logger.info("⏰ Forced alert sweep requested")
        return await self._sweep_cycle()

    async def _run(self, stop_event: asyncio.Event):
        loop = asyncio.get_running_loop()
        while not stop_event.is_set():
            started = loop.time()
            try:
                await self._sweep_cycle()
            except Exception as e:
                logger.error(f"❌ Alert sweep cycle failed: {e}", exc_info=True)

            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self._remaining(loop.time() - started))
            except asyncio.TimeoutError:
                pass

    def _remaining(self, elapsed: float) -> float:
        """Time left until the next tick, so ticks stay interval_seconds apart."""
        return max(0.0, self.interval_seconds - elapsed)

    async def _sweep_cycle(self) -> int:
        db = self.session_factory()
        try:
            recurring = await self.alert_service.sweep_recurring_alerts(db)
            queen = await self.alert_service.sweep_queen_alerts(db)
        finally:
            db.close()

        total = len(recurring) + len(queen)
        if total:
            logger.info(f"🐝 Sweep generated {len(recurring)} recurring and {len(queen)} queen alerts")
        else:
            logger.info("🐝 Sweep found no pending recurring or queen alerts")
        return total
