"""Per-year holiday cache handed to the shift classifier."""

import datetime
import logging
import threading
from collections.abc import Callable, Iterable

from nomina.core.holidays import colombian_holidays

logger = logging.getLogger(__name__)

HolidaySource = Callable[[int], Iterable[datetime.date]]


class HolidayCalendar:
    """
    Explicit holiday cache keyed by year.

    The calendar is owned by the caller (the API keeps one on app.state) and
    the engine only ever sees the resolved frozenset of dates. A source error
    is logged and propagated; nothing is cached for that year.

    Args:
        source: Callable returning the holiday dates of a year
        extra_holidays: Additional dates added to whatever the source returns
    """

    def __init__(
        self,
        source: HolidaySource = colombian_holidays,
        extra_holidays: Iterable[datetime.date] = (),
    ):
        self._source = source
        self._extra = frozenset(extra_holidays)
        self._cache: dict[int, frozenset[datetime.date]] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings, source: HolidaySource = colombian_holidays) -> "HolidayCalendar":
        return cls(source=source, extra_holidays=settings.extra_holidays)

    def for_year(self, year: int) -> frozenset[datetime.date]:
        """Holiday dates of one year (cached after the first lookup)."""
        with self._lock:
            cached = self._cache.get(year)
        if cached is not None:
            return cached

        try:
            fetched = list(self._source(year))
        except Exception:
            logger.exception("Holiday lookup failed for year %s", year)
            raise

        in_year = {d for d in fetched if d.year == year}
        if len(in_year) < len(set(fetched)):
            logger.warning("Holiday source returned dates outside %s; they were ignored", year)

        dates = frozenset(in_year) | frozenset(d for d in self._extra if d.year == year)
        if not dates:
            logger.warning("No holidays known for %s; only Sundays will be treated as rest days", year)

        with self._lock:
            self._cache[year] = dates
        logger.debug("Cached %d holidays for %s", len(dates), year)
        return dates

    def for_years(self, years: Iterable[int]) -> frozenset[datetime.date]:
        """Union of the holidays of several years."""
        result: frozenset[datetime.date] = frozenset()
        for year in sorted(set(years)):
            result |= self.for_year(year)
        return result

    def is_holiday(self, date: datetime.date) -> bool:
        return date in self.for_year(date.year)

    def cached_years(self) -> list[int]:
        with self._lock:
            return sorted(self._cache)

    def clear(self) -> None:
        """Drop every cached year."""
        with self._lock:
            self._cache.clear()
