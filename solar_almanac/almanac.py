"""Almanac facade: one engine, one set of caches, one run.

Bundles sun times, seasons, moon phases and day length statistics behind a
single object. The solar engine is selected when the Almanac is built.
"""

import datetime
import logging
import os
from typing import Mapping

from . import lunar, seasons
from ._types import (
    AlmanacConfig,
    DayStatistics,
    EquinoxSolsticeSet,
    GeoLocation,
    LunarPhaseEvent,
    LunarPhaseWindow,
    SolarDayProfile,
    WeekComparison,
    WeekSummary,
)
from .cache import InsertionOrderCache
from .daylight import (
    DayLengthStatistics,
    YearlyDistributionCache,
    compare_week_to_last_year,
    day_statistics,
    summarize_week,
    week_day_lengths,
)
from .engines import select_engine
from .time_scales import normalize_month, utc_offset_tz

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = AlmanacConfig()

ENGINE_ENV = "SOLAR_ALMANAC_ENGINE"
CACHE_SIZE_ENV = "SOLAR_ALMANAC_CACHE_SIZE"


def config_from_env(environ: Mapping[str, str] = os.environ) -> AlmanacConfig:
    """Build an AlmanacConfig, overriding defaults from environment variables.

    Raises:
        ValueError: SOLAR_ALMANAC_CACHE_SIZE is not a positive integer
    """
    engine = environ.get(ENGINE_ENV, DEFAULT_CONFIG.engine).strip().lower()
    raw_size = environ.get(CACHE_SIZE_ENV)
    if raw_size is None:
        size = DEFAULT_CONFIG.cache_max_entries
    else:
        try:
            size = int(raw_size)
        except ValueError:
            raise ValueError(f"{CACHE_SIZE_ENV} must be an integer, got {raw_size!r}") from None
        if size < 1:
            raise ValueError(f"{CACHE_SIZE_ENV} must be positive, got {size}")
    return AlmanacConfig(engine=engine, cache_max_entries=size)


def sun_times_key(
    year: int, month: int, day: int, latitude: float, longitude: float, utc_offset_hours: float
) -> str:
    return f"{year}-{month}-{day}:{latitude:.4f}:{longitude:.4f}:{utc_offset_hours:.2f}"


class Almanac:
    """Entry point for every almanac query.

    Caches belong to the instance; build one per run or worker.
    """

    def __init__(self, config: AlmanacConfig = DEFAULT_CONFIG):
        self.config = config
        self.engine = select_engine(config.engine)
        self._sun_times = InsertionOrderCache(
            config.cache_max_entries, config.eviction_fraction, name="sun times"
        )
        self._moon_months = InsertionOrderCache(
            config.cache_max_entries, config.eviction_fraction, name="moon months"
        )
        self.statistics = DayLengthStatistics(
            self.engine,
            YearlyDistributionCache(config.cache_max_entries, config.eviction_fraction),
        )

    def sun_times(
        self,
        year: int,
        month: int,
        day: int,
        latitude: float,
        longitude: float,
        utc_offset_hours: float,
    ) -> SolarDayProfile:
        if not self.config.memoize_sun_times:
            return self.engine.sun_times(year, month, day, latitude, longitude, utc_offset_hours)
        key = sun_times_key(year, month, day, latitude, longitude, utc_offset_hours)
        return self._sun_times.get_or_compute(
            key,
            lambda: self.engine.sun_times(
                year, month, day, latitude, longitude, utc_offset_hours
            ),
        )

    def equinoxes_solstices(self, year: int) -> EquinoxSolsticeSet:
        return seasons.compute_equinoxes_solstices(year)

    def phases_for_month(self, year: int, month: int) -> list[LunarPhaseEvent]:
        year, month = normalize_month(year, month)
        key = (year, month)
        if key not in self._moon_months:
            logger.debug("Computing moon phases for %04d-%02d", year, month)
            self._moon_months.set(key, lunar.phases_for_month(year, month))
        return list(self._moon_months.get(key))

    def phase_at(self, timestamp: int, utc_offset_hours: float = 0.0) -> LunarPhaseWindow:
        return lunar.phase_at(timestamp, utc_offset_hours, phases_for=self.phases_for_month)

    def percentile(
        self,
        daylength_h: float,
        latitude: float,
        longitude: float,
        year: int,
        utc_offset_hours: float,
    ) -> float:
        return self.statistics.percentile(
            daylength_h, latitude, longitude, year, utc_offset_hours
        )

    def week_summary(
        self,
        week_start: datetime.date,
        latitude: float,
        longitude: float,
        utc_offset_hours: float,
    ) -> WeekSummary:
        """Day length summary for seven days, with the moon phase at the start."""
        lengths = week_day_lengths(
            self.engine, week_start, latitude, longitude, utc_offset_hours
        )
        midnight = datetime.datetime.combine(
            week_start, datetime.time(), tzinfo=utc_offset_tz(utc_offset_hours)
        )
        window = self.phase_at(int(midnight.timestamp()), utc_offset_hours)
        return summarize_week(lengths, window.current_phase_label)

    def day_statistics(
        self, day: datetime.date, location: GeoLocation, utc_offset_hours: float
    ) -> DayStatistics:
        return day_statistics(self.engine, self.statistics, day, location, utc_offset_hours)

    def compare_week_to_last_year(
        self, week_start: datetime.date, location: GeoLocation, utc_offset_hours: float
    ) -> WeekComparison:
        return compare_week_to_last_year(self.engine, week_start, location, utc_offset_hours)

    def cache_stats(self) -> dict[str, int]:
        return {
            "sun_times": len(self._sun_times),
            "moon_months": len(self._moon_months),
            "distributions": len(self.statistics.cache),
        }

    def clear_caches(self) -> None:
        self._sun_times.clear()
        self._moon_months.clear()
        self.statistics.cache.clear()
