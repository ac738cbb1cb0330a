"""Frozen dataclasses for all structured return types."""

from dataclasses import dataclass
from datetime import datetime as DateTime, date as Date, timezone
from enum import StrEnum


class PolarState(StrEnum):
    NONE = "none"
    POLAR_DAY = "polar_day"
    POLAR_NIGHT = "polar_night"


class PhaseKind(StrEnum):
    NEW = "New Moon"
    FIRST_QUARTER = "First Quarter"
    FULL = "Full Moon"
    LAST_QUARTER = "Last Quarter"


class PhaseLabel(StrEnum):
    NEW = "New Moon"
    WAXING_CRESCENT = "Waxing Crescent"
    FIRST_QUARTER = "First Quarter"
    WAXING_GIBBOUS = "Waxing Gibbous"
    FULL = "Full Moon"
    WANING_GIBBOUS = "Waning Gibbous"
    LAST_QUARTER = "Last Quarter"
    WANING_CRESCENT = "Waning Crescent"
    UNKNOWN = "Unknown"


class Trend(StrEnum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class LatitudeNote(StrEnum):
    ARCTIC = "arctic"
    ANTARCTIC = "antarctic"
    HIGH_LATITUDE = "high_latitude"
    TROPICAL = "tropical"
    EQUATORIAL = "equatorial"


@dataclass(frozen=True)
class GeoLocation:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class SolarPosition:
    """Sun's apparent position at local noon of one civil date."""

    julian_century: float
    declination_deg: float
    equation_of_time_min: float


@dataclass(frozen=True)
class SolarDayProfile:
    declination_deg: float
    equation_of_time_min: float
    solar_noon_frac: float
    sunrise_frac: float
    sunset_frac: float
    civil_begin_frac: float
    civil_end_frac: float
    nautical_begin_frac: float
    nautical_end_frac: float
    astro_begin_frac: float
    astro_end_frac: float
    daylength_h: float
    polar: PolarState = PolarState.NONE


@dataclass(frozen=True)
class EquinoxSolsticeSet:
    year: int
    march_equinox: int
    june_solstice: int
    september_equinox: int
    december_solstice: int

    def as_dict(self) -> dict[str, int]:
        return {
            "march_equinox": self.march_equinox,
            "june_solstice": self.june_solstice,
            "september_equinox": self.september_equinox,
            "december_solstice": self.december_solstice,
        }


@dataclass(frozen=True)
class LunarPhaseEvent:
    phase_kind: PhaseKind
    lunation_number: float
    julian_ephemeris_day: float
    utc_instant: int

    @property
    def utc_datetime(self) -> DateTime:
        return DateTime.fromtimestamp(self.utc_instant, tz=timezone.utc)


@dataclass(frozen=True)
class LunarPhaseWindow:
    current_phase_label: PhaseLabel
    illumination_pct: float
    prev_phase: LunarPhaseEvent | None
    next_phase: LunarPhaseEvent | None


@dataclass(frozen=True)
class YearlyDaylightDistribution:
    latitude: float
    longitude: float
    year: int
    utc_offset_hours: float
    daylengths_h: tuple[float, ...]

    def __len__(self) -> int:
        return len(self.daylengths_h)


@dataclass(frozen=True)
class WeekSummary:
    avg_length_s: float
    min_length_s: float
    max_length_s: float
    total_change_s: float
    trend: Trend
    shortest_day: Date
    longest_day: Date
    moon_phase: PhaseLabel


@dataclass(frozen=True)
class AlmanacConfig:
    engine: str = "meeus"
    cache_max_entries: int = 100
    eviction_fraction: float = 0.1
    memoize_sun_times: bool = True


@dataclass(frozen=True)
class DayStatistics:
    """Day/night balance of one date, compared with its neighbours and solstices.

    Winter and summer follow the hemisphere of the location.
    """

    date: Date
    daylight_s: int
    night_s: int
    daylight_pct: float
    night_pct: float
    day_change_s: int
    night_change_s: int
    daylight_percentile: float
    night_percentile: float
    winter_solstice: Date
    summer_solstice: Date
    diff_from_winter_s: int
    diff_from_summer_s: int


@dataclass(frozen=True)
class WeekComparison:
    week_start: Date
    avg_length_s: float
    last_year_week_start: Date
    last_year_avg_length_s: float
    difference_s: float
