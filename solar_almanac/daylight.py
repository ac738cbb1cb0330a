"""Day length statistics over a full year.

Builds the sorted distribution of a year's day lengths for one location
and ranks individual days against it. Distributions are cached per
(latitude, longitude, year, UTC offset).
"""

import bisect
import datetime
import logging
from concurrent.futures import Executor

from ._types import (
    DayStatistics,
    GeoLocation,
    LatitudeNote,
    PhaseLabel,
    Trend,
    WeekComparison,
    WeekSummary,
    YearlyDaylightDistribution,
)
from .cache import DEFAULT_EVICTION_FRACTION, DEFAULT_MAX_ENTRIES, InsertionOrderCache
from .engines import MeeusEngine, SolarEngine
from .seasons import compute_equinoxes_solstices
from .time_scales import (
    SECONDS_PER_DAY,
    days_in_year,
    iter_year_dates,
    timestamp_to_local_date,
)

logger = logging.getLogger(__name__)

TREND_THRESHOLD_SECONDS = 300.0
DAYS_PER_WEEK = 7


def distribution_key(
    latitude: float, longitude: float, year: int, utc_offset_hours: float
) -> str:
    return f"{latitude:.4f}:{longitude:.4f}:{year}:{utc_offset_hours:.2f}"


class YearlyDistributionCache(InsertionOrderCache[str, YearlyDaylightDistribution]):
    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        eviction_fraction: float = DEFAULT_EVICTION_FRACTION,
    ):
        super().__init__(max_entries, eviction_fraction, name="daylight distributions")


def build_distribution(
    engine: SolarEngine,
    latitude: float,
    longitude: float,
    year: int,
    utc_offset_hours: float,
    executor: Executor | None = None,
) -> YearlyDaylightDistribution:
    """Compute and sort the day length of every day of the year.

    Days are independent, so an executor may spread the calls; the result
    is the same as the sequential build.
    """
    def daylength(date: tuple[int, int, int]) -> float:
        return engine.sun_times(*date, latitude, longitude, utc_offset_hours).daylength_h

    dates = list(iter_year_dates(year))
    if executor is None:
        lengths = [daylength(d) for d in dates]
    else:
        lengths = list(executor.map(daylength, dates))
    logger.debug(
        "Built %d-day daylight distribution for %s",
        len(lengths),
        distribution_key(latitude, longitude, year, utc_offset_hours),
    )
    return YearlyDaylightDistribution(
        latitude=latitude,
        longitude=longitude,
        year=year,
        utc_offset_hours=utc_offset_hours,
        daylengths_h=tuple(sorted(lengths)),
    )


def rank_percentile(daylength_h: float, distribution: YearlyDaylightDistribution) -> float:
    """Percent of the year's days strictly shorter than daylength_h."""
    below = bisect.bisect_left(distribution.daylengths_h, daylength_h)
    return 100.0 * below / days_in_year(distribution.year)


class DayLengthStatistics:
    """Percentile ranking of day lengths, backed by a distribution cache."""

    def __init__(
        self,
        engine: SolarEngine | None = None,
        cache: YearlyDistributionCache | None = None,
        executor: Executor | None = None,
    ):
        self.engine = engine if engine is not None else MeeusEngine()
        self.cache = cache if cache is not None else YearlyDistributionCache()
        self.executor = executor

    def distribution(
        self, latitude: float, longitude: float, year: int, utc_offset_hours: float
    ) -> YearlyDaylightDistribution:
        key = distribution_key(latitude, longitude, year, utc_offset_hours)
        return self.cache.get_or_compute(
            key,
            lambda: build_distribution(
                self.engine, latitude, longitude, year, utc_offset_hours, self.executor
            ),
        )

    def percentile(
        self,
        daylength_h: float,
        latitude: float,
        longitude: float,
        year: int,
        utc_offset_hours: float,
    ) -> float:
        return rank_percentile(
            daylength_h, self.distribution(latitude, longitude, year, utc_offset_hours)
        )


def daylight_trend(total_change_s: float) -> Trend:
    if total_change_s > TREND_THRESHOLD_SECONDS:
        return Trend.INCREASING
    if total_change_s < -TREND_THRESHOLD_SECONDS:
        return Trend.DECREASING
    return Trend.STABLE


def week_day_lengths(
    engine: SolarEngine,
    week_start: datetime.date,
    latitude: float,
    longitude: float,
    utc_offset_hours: float,
) -> list[tuple[datetime.date, float]]:
    """(date, day length in seconds) for seven days from week_start."""
    days = [week_start + datetime.timedelta(days=i) for i in range(DAYS_PER_WEEK)]
    return [
        (
            d,
            engine.sun_times(
                d.year, d.month, d.day, latitude, longitude, utc_offset_hours
            ).daylength_h
            * 3600.0,
        )
        for d in days
    ]


def summarize_week(
    day_lengths: list[tuple[datetime.date, float]], moon_phase: PhaseLabel
) -> WeekSummary:
    """Aggregate a run of (date, seconds) day lengths.

    Change is measured from the first day to the last.
    """
    if not day_lengths:
        raise ValueError("day_lengths must not be empty")
    lengths = [seconds for _, seconds in day_lengths]
    shortest = min(day_lengths, key=lambda item: item[1])
    longest = max(day_lengths, key=lambda item: item[1])
    total_change = lengths[-1] - lengths[0]
    return WeekSummary(
        avg_length_s=sum(lengths) / len(lengths),
        min_length_s=shortest[1],
        max_length_s=longest[1],
        total_change_s=total_change,
        trend=daylight_trend(total_change),
        shortest_day=shortest[0],
        longest_day=longest[0],
        moon_phase=moon_phase,
    )


def daylight_seconds(
    engine: SolarEngine, day: datetime.date, location: GeoLocation, utc_offset_hours: float
) -> int:
    profile = engine.sun_times(
        day.year, day.month, day.day, location.latitude, location.longitude, utc_offset_hours
    )
    return round(profile.daylength_h * 3600)


def solstice_dates(year: int, utc_offset_hours: float) -> tuple[datetime.date, datetime.date]:
    """Local civil dates of the June and December solstices."""
    events = compute_equinoxes_solstices(year)
    return (
        timestamp_to_local_date(events.june_solstice, utc_offset_hours),
        timestamp_to_local_date(events.december_solstice, utc_offset_hours),
    )


def day_statistics(
    engine: SolarEngine,
    statistics: DayLengthStatistics,
    day: datetime.date,
    location: GeoLocation,
    utc_offset_hours: float,
) -> DayStatistics:
    """Day/night split of a date and how it compares with the previous day,
    the rest of the year and both solstices.
    """
    profile = engine.sun_times(
        day.year, day.month, day.day, location.latitude, location.longitude, utc_offset_hours
    )
    daylight = round(profile.daylength_h * 3600)
    night = SECONDS_PER_DAY - daylight
    previous = daylight_seconds(
        engine, day - datetime.timedelta(days=1), location, utc_offset_hours
    )
    percentile = statistics.percentile(
        profile.daylength_h, location.latitude, location.longitude, day.year, utc_offset_hours
    )

    june, december = solstice_dates(day.year, utc_offset_hours)
    winter, summer = (december, june) if location.latitude >= 0 else (june, december)
    winter_s = daylight_seconds(engine, winter, location, utc_offset_hours)
    summer_s = daylight_seconds(engine, summer, location, utc_offset_hours)

    return DayStatistics(
        date=day,
        daylight_s=daylight,
        night_s=night,
        daylight_pct=round(daylight / SECONDS_PER_DAY * 100, 1),
        night_pct=round(night / SECONDS_PER_DAY * 100, 1),
        day_change_s=daylight - previous,
        night_change_s=previous - daylight,
        daylight_percentile=percentile,
        night_percentile=100.0 - percentile,
        winter_solstice=winter,
        summer_solstice=summer,
        diff_from_winter_s=daylight - winter_s,
        diff_from_summer_s=daylight - summer_s,
    )


def same_week_last_year(week_start: datetime.date) -> datetime.date:
    """Same date one year earlier, moved back to the preceding Sunday."""
    try:
        earlier = week_start.replace(year=week_start.year - 1)
    except ValueError:
        # Feb 29 has no counterpart
        earlier = datetime.date(week_start.year - 1, 2, 28)
    return earlier - datetime.timedelta(days=(earlier.weekday() + 1) % DAYS_PER_WEEK)


def compare_week_to_last_year(
    engine: SolarEngine,
    week_start: datetime.date,
    location: GeoLocation,
    utc_offset_hours: float,
) -> WeekComparison:
    def average(start: datetime.date) -> float:
        lengths = week_day_lengths(
            engine, start, location.latitude, location.longitude, utc_offset_hours
        )
        return sum(seconds for _, seconds in lengths) / len(lengths)

    last_year_start = same_week_last_year(week_start)
    current = average(week_start)
    last_year = average(last_year_start)
    return WeekComparison(
        week_start=week_start,
        avg_length_s=current,
        last_year_week_start=last_year_start,
        last_year_avg_length_s=last_year,
        difference_s=current - last_year,
    )


def latitude_notes(latitude: float) -> tuple[LatitudeNote, ...]:
    """Climate-zone notes that apply to a latitude."""
    lat = abs(latitude)
    notes = []
    if lat > 66.5:
        notes.append(LatitudeNote.ARCTIC if latitude > 0 else LatitudeNote.ANTARCTIC)
    if 60.0 < lat <= 66.5:
        notes.append(LatitudeNote.HIGH_LATITUDE)
    if lat < 23.5:
        notes.append(LatitudeNote.TROPICAL)
    if lat < 5.0:
        notes.append(LatitudeNote.EQUATORIAL)
    return tuple(notes)
