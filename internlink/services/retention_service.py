"""
Retention cleanup for closed internships and their applications.

A sweep drops internships that are closed and older than the retention
window, drops applications whose internship did not survive, and records the
sweep time. The three writes go to the backend as one batch, so a failure
leaves the previous state intact.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from internlink.core.config import Settings, get_settings
from internlink.domain.entities import INTERNSHIP_STATUS_ACTIVE
from internlink.domain.identifiers import epoch_millis, parse_iso, utcnow
from internlink.domain.validation import normalize_internship_status
from internlink.repositories.collection_store import (
    APPLICATIONS_KEY,
    INTERNSHIPS_KEY,
    LAST_CLEANUP_KEY,
    CollectionStore,
)

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    swept_at: datetime
    removed_internship_ids: list[str] = field(default_factory=list)
    removed_application_ids: list[str] = field(default_factory=list)
    kept_internships: int = 0
    kept_applications: int = 0


def months_before(moment: datetime, months: int) -> datetime:
    """Same wall-clock time `months` calendar months earlier, clamping the day."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class RetentionSweeper:
    """Time-gated cleanup pass over the internship and application collections."""

    def __init__(
        self,
        store: CollectionStore,
        *,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        settings = settings or get_settings()
        self.store = store
        self.clock = clock or utcnow
        self.interval = timedelta(days=settings.cleanup_interval_days)
        self.retention_months = settings.retention_months

    def last_cleanup(self) -> Optional[datetime]:
        raw = self.store.read_scalar(LAST_CLEANUP_KEY)
        try:
            millis = int(str(raw).strip())
        except (TypeError, ValueError):
            return None
        try:
            return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.warning("Ignoring out-of-range %s value %r", LAST_CLEANUP_KEY, raw)
            return None

    def is_due(self, now: Optional[datetime] = None) -> bool:
        now = now or self.clock()
        last = self.last_cleanup()
        if last is None:
            return True
        return now - last > self.interval

    def _keep_internship(self, internship: dict, cutoff: datetime) -> bool:
        if normalize_internship_status(internship.get("status")) == INTERNSHIP_STATUS_ACTIVE:
            return True
        created = parse_iso(internship.get("createdAt"))
        if created is None:
            logger.warning("Internship %s has no readable createdAt; keeping it", internship.get("id"))
            return True
        return created > cutoff

    def sweep(self, now: Optional[datetime] = None) -> SweepResult:
        now = now or self.clock()
        cutoff = months_before(now, self.retention_months)
        result = SweepResult(swept_at=now)

        kept_internships = []
        for internship in self.store.read(INTERNSHIPS_KEY):
            if self._keep_internship(internship, cutoff):
                kept_internships.append(internship)
            else:
                result.removed_internship_ids.append(internship.get("id"))

        surviving_ids = {i.get("id") for i in kept_internships}
        kept_applications = []
        for application in self.store.read(APPLICATIONS_KEY):
            if application.get("internshipId") in surviving_ids:
                kept_applications.append(application)
            else:
                result.removed_application_ids.append(application.get("id"))

        self.store.write_many(
            {INTERNSHIPS_KEY: kept_internships, APPLICATIONS_KEY: kept_applications},
            scalars={LAST_CLEANUP_KEY: str(epoch_millis(now))},
        )
        result.kept_internships = len(kept_internships)
        result.kept_applications = len(kept_applications)
        logger.info(
            "Cleanup removed %d internships and %d applications",
            len(result.removed_internship_ids),
            len(result.removed_application_ids),
        )
        return result

    def run_if_due(self, now: Optional[datetime] = None) -> Optional[SweepResult]:
        """Sweep when the interval has elapsed; failures are logged, not raised."""
        now = now or self.clock()
        try:
            if not self.is_due(now):
                return None
            return self.sweep(now)
        except Exception:
            logger.exception("Error during cleanup")
            return None
