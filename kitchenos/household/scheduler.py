"""Scheduled expiry and budget checks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..client import KitchenOS
from .expiry import ExpiryStatus
from .shopping import BudgetLevel
from .state import FamilyState, InventoryState

if TYPE_CHECKING:
    from .config import HouseholdConfig

logger = logging.getLogger(__name__)


class ExpiryWatchScheduler:
    """Runs periodic inventory and budget checks against the backend.

    Uses APScheduler for cron-based scheduling.
    """

    def __init__(self, config: HouseholdConfig) -> None:
        """Initialize scheduler with a HouseholdConfig.

        Raises:
            ImportError: If apscheduler is not installed.
        """
        try:
            from apscheduler.schedulers.asyncio import AsyncIOScheduler
            from apscheduler.triggers.cron import CronTrigger
        except ImportError:
            raise ImportError(
                "apscheduler is required: pip install 'kitchenos[scheduler]'"
            )

        self._config = config
        self._scheduler = AsyncIOScheduler()
        self._CronTrigger = CronTrigger
        self._running = False

    def setup_jobs(self) -> None:
        """Register scheduled jobs based on config."""
        sc = self._config.scheduler

        self._scheduler.add_job(
            self._job_check_expiry,
            trigger=self._parse_cron(sc.expiry_check_schedule),
            id="expiry_check",
            name="Inventory expiry check",
            replace_existing=True,
        )
        logger.info("Registered expiry check: %s", sc.expiry_check_schedule)

        if sc.budget_check_enabled:
            self._scheduler.add_job(
                self._job_check_budget,
                trigger=self._parse_cron(sc.budget_check_schedule),
                id="budget_check",
                name="Budget check",
                replace_existing=True,
            )
            logger.info("Registered budget check: %s", sc.budget_check_schedule)

    def start(self) -> None:
        self.setup_jobs()
        self._scheduler.start()
        self._running = True
        logger.info("Scheduler started")

    def stop(self) -> None:
        if self._running:
            self._scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Scheduler stopped")

    @property
    def running(self) -> bool:
        return self._running

    def get_jobs(self) -> list[dict]:
        """Return info about scheduled jobs."""
        jobs = []
        for job in self._scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": str(next_run) if next_run else None,
            })
        return jobs

    def _parse_cron(self, expr: str):
        """Parse a five-field cron expression into a CronTrigger."""
        parts = expr.split()
        if len(parts) == 5:
            return self._CronTrigger(
                minute=parts[0],
                hour=parts[1],
                day=parts[2],
                month=parts[3],
                day_of_week=parts[4],
            )
        raise ValueError(f"Invalid cron expression: {expr}")

    def _client(self) -> KitchenOS:
        api = self._config.api
        return KitchenOS(token=api.token, base_url=api.base_url, timeout=api.timeout)

    async def _job_check_expiry(self) -> None:
        """Log inventory items that are expired or about to expire."""
        logger.info("Running expiry check...")

        try:
            async with self._client() as client:
                state = InventoryState(client)
                result = await state.fetch()
            if not result.ok:
                logger.error("Expiry check could not load inventory: %s", result.error)
                return

            soon = state.expiring(days_ahead=self._config.expiry.days_ahead)
            expired = [f for f in soon if f.expiry.status is ExpiryStatus.EXPIRED]
            for f in soon:
                logger.info(
                    "%s: %s (%s days left)",
                    f.name,
                    f.expiry.status.value,
                    f.expiry.days_until_expiration,
                )
            if soon:
                logger.warning(
                    "%d item(s) expiring soon, %d already expired",
                    len(soon) - len(expired),
                    len(expired),
                )
        except Exception:
            logger.exception("Expiry check failed")

    async def _job_check_budget(self) -> None:
        """Warn when the family budget is nearly spent."""
        logger.info("Running budget check...")

        try:
            async with self._client() as client:
                state = FamilyState(client)
                result = await state.fetch()
            if not result.ok:
                logger.error("Budget check could not load family: %s", result.error)
                return

            progress = state.budget
            if progress is not None and progress.level is not BudgetLevel.SUCCESS:
                logger.warning(
                    "Budget %d%% spent (%s)", progress.percentage, progress.level.value
                )
        except Exception:
            logger.exception("Budget check failed")
