"""Sunrise, sunset and twilight boundaries for one civil date and location.

Low-precision solar coordinates (Meeus, "Astronomical Algorithms" ch. 25,
NOAA variant) evaluated once at local noon. All angles in degrees unless
otherwise noted; all *_frac values are fractions of the local civil day.
"""

import math

from ._types import PolarState, SolarDayProfile, SolarPosition
from .time_scales import julian_century, julian_day

SUNRISE_ALTITUDE = -0.833
CIVIL_ALTITUDE = -6.0
NAUTICAL_ALTITUDE = -12.0
ASTRONOMICAL_ALTITUDE = -18.0

DEGREES_PER_HOUR = 15.0
MINUTES_PER_DAY = 1440.0


def deg_to_rad(deg: float) -> float:
    """Convert degrees to radians."""
    return deg * (math.pi / 180.0)


def rad_to_deg(rad: float) -> float:
    """Convert radians to degrees."""
    return rad * (180.0 / math.pi)


def normalize_angle(angle: float) -> float:
    """Normalize angle to 0-360 degree range."""
    return angle % 360.0


def sun_mean_longitude(t: float) -> float:
    return normalize_angle(280.46646 + t * (36000.76983 + 0.0003032 * t))


def sun_mean_anomaly(t: float) -> float:
    return 357.52911 + t * (35999.05029 - 0.0001537 * t)


def earth_orbit_eccentricity(t: float) -> float:
    return 0.016708634 - t * (0.000042037 + 0.0000001267 * t)


def sun_equation_of_center(t: float, mean_anomaly: float) -> float:
    m = deg_to_rad(mean_anomaly)
    return (
        math.sin(m) * (1.914602 - t * (0.004817 + 0.000014 * t))
        + math.sin(2 * m) * (0.019993 - 0.000101 * t)
        + math.sin(3 * m) * 0.000289
    )


def _nutation_node(t: float) -> float:
    return deg_to_rad(125.04 - 1934.136 * t)


def sun_apparent_longitude(t: float, true_longitude: float) -> float:
    return true_longitude - 0.00569 - 0.00478 * math.sin(_nutation_node(t))


def mean_obliquity(t: float) -> float:
    """Mean obliquity of the ecliptic."""
    seconds = 21.448 - t * (46.815 + t * (0.00059 - t * 0.001813))
    return 23.0 + (26.0 + seconds / 60.0) / 60.0


def corrected_obliquity(t: float, eps0: float) -> float:
    return eps0 + 0.00256 * math.cos(_nutation_node(t))


def solar_declination(apparent_longitude: float, obliquity: float) -> float:
    return rad_to_deg(
        math.asin(
            math.sin(deg_to_rad(obliquity)) * math.sin(deg_to_rad(apparent_longitude))
        )
    )


def equation_of_time(
    mean_longitude: float, eccentricity: float, mean_anomaly: float, obliquity: float
) -> float:
    """Calculate the Equation of Time.

    Output: apparent minus mean solar time, in minutes
    """
    y = math.tan(deg_to_rad(obliquity) / 2) ** 2
    l0 = deg_to_rad(mean_longitude)
    m = deg_to_rad(mean_anomaly)
    e = eccentricity
    return 4.0 * rad_to_deg(
        y * math.sin(2 * l0)
        - 2 * e * math.sin(m)
        + 4 * e * y * math.sin(m) * math.cos(2 * l0)
        - 0.5 * y * y * math.sin(4 * l0)
        - 1.25 * e * e * math.sin(2 * m)
    )


def solar_position_at(jd: float) -> SolarPosition:
    """Declination and equation of time at a Julian Day."""
    t = julian_century(jd)
    l0 = sun_mean_longitude(t)
    m = sun_mean_anomaly(t)
    e = earth_orbit_eccentricity(t)
    true_longitude = l0 + sun_equation_of_center(t, m)
    apparent = sun_apparent_longitude(t, true_longitude)
    eps = corrected_obliquity(t, mean_obliquity(t))
    return SolarPosition(
        julian_century=t,
        declination_deg=solar_declination(apparent, eps),
        equation_of_time_min=equation_of_time(l0, e, m, eps),
    )


def hour_angle_for_altitude(latitude: float, declination: float, altitude: float) -> float:
    """Hour angle (degrees) at which the sun crosses the given altitude.

    Returns 0 when the sun never climbs to the altitude and 180 when it
    never sinks below it.
    """
    cos_h = _cos_hour_angle(latitude, declination, altitude)
    # Clamp to [-1, 1]: out of range means the altitude is never crossed
    return rad_to_deg(math.acos(max(-1.0, min(1.0, cos_h))))


def _cos_hour_angle(latitude: float, declination: float, altitude: float) -> float:
    lat_rad = deg_to_rad(latitude)
    dec_rad = deg_to_rad(declination)
    denominator = math.cos(lat_rad) * math.cos(dec_rad)
    numerator = math.sin(deg_to_rad(altitude)) - math.sin(lat_rad) * math.sin(dec_rad)
    if denominator == 0.0:
        # Pole: the sun circles at constant altitude
        return math.copysign(math.inf, numerator) if numerator else 1.0
    return numerator / denominator


def solar_noon_fraction(longitude: float, eot: float, utc_offset_hours: float) -> float:
    """Local clock time of solar transit as a fraction of the day.

    Wrapped into [0, 1): across the date line the zone offset and the
    longitude disagree by a whole day.
    """
    return ((720.0 - 4.0 * longitude - eot + 60.0 * utc_offset_hours) / MINUTES_PER_DAY) % 1.0


def elevation_at_noon(latitude: float, declination: float) -> float:
    return 90.0 - abs(latitude - declination)


def polar_state(latitude: float, declination: float) -> PolarState:
    """Classify a date as ordinary, midnight sun or polar night.

    A date is polar when the sunrise hour angle is degenerate; the sign of
    the noon elevation then decides between day and night for every
    threshold at once.
    """
    cos_h = _cos_hour_angle(latitude, declination, SUNRISE_ALTITUDE)
    if -1.0 <= cos_h <= 1.0:
        return PolarState.NONE
    if elevation_at_noon(latitude, declination) > 0:
        return PolarState.POLAR_DAY
    return PolarState.POLAR_NIGHT


def _offset(hour_angle: float) -> float:
    return hour_angle * 4.0 / MINUTES_PER_DAY


def build_profile(
    latitude: float, declination: float, eot: float, noon: float
) -> SolarDayProfile:
    """Assemble a SolarDayProfile from position and transit time."""
    state = polar_state(latitude, declination)
    match state:
        case PolarState.POLAR_DAY:
            return SolarDayProfile(
                declination_deg=declination,
                equation_of_time_min=eot,
                solar_noon_frac=noon,
                sunrise_frac=0.0,
                sunset_frac=1.0,
                civil_begin_frac=0.0,
                civil_end_frac=1.0,
                nautical_begin_frac=0.0,
                nautical_end_frac=1.0,
                astro_begin_frac=0.0,
                astro_end_frac=1.0,
                daylength_h=24.0,
                polar=state,
            )
        case PolarState.POLAR_NIGHT:
            return SolarDayProfile(
                declination_deg=declination,
                equation_of_time_min=eot,
                solar_noon_frac=0.5,
                sunrise_frac=0.5,
                sunset_frac=0.5,
                civil_begin_frac=0.5,
                civil_end_frac=0.5,
                nautical_begin_frac=0.5,
                nautical_end_frac=0.5,
                astro_begin_frac=0.5,
                astro_end_frac=0.5,
                daylength_h=0.0,
                polar=state,
            )

    ha_sun = hour_angle_for_altitude(latitude, declination, SUNRISE_ALTITUDE)
    ha_civil = hour_angle_for_altitude(latitude, declination, CIVIL_ALTITUDE)
    ha_nautical = hour_angle_for_altitude(latitude, declination, NAUTICAL_ALTITUDE)
    ha_astro = hour_angle_for_altitude(latitude, declination, ASTRONOMICAL_ALTITUDE)
    return SolarDayProfile(
        declination_deg=declination,
        equation_of_time_min=eot,
        solar_noon_frac=noon,
        sunrise_frac=noon - _offset(ha_sun),
        sunset_frac=noon + _offset(ha_sun),
        civil_begin_frac=noon - _offset(ha_civil),
        civil_end_frac=noon + _offset(ha_civil),
        nautical_begin_frac=noon - _offset(ha_nautical),
        nautical_end_frac=noon + _offset(ha_nautical),
        astro_begin_frac=noon - _offset(ha_astro),
        astro_end_frac=noon + _offset(ha_astro),
        daylength_h=2.0 * ha_sun / DEGREES_PER_HOUR,
        polar=state,
    )


def compute_sun_times(
    year: int,
    month: int,
    day: int,
    latitude: float,
    longitude: float,
    utc_offset_hours: float,
) -> SolarDayProfile:
    """Sun and twilight times for a civil date at a location.

    Args:
        latitude: Observer's latitude (degrees, negative for South)
        longitude: Observer's longitude (degrees, negative for West)
        utc_offset_hours: Offset of the local civil clock from UTC

    Returns:
        SolarDayProfile with every boundary as a fraction of the local day
    """
    pos = solar_position_at(julian_day(year, month, day, 12.0 - utc_offset_hours))
    noon = solar_noon_fraction(longitude, pos.equation_of_time_min, utc_offset_hours)
    return build_profile(latitude, pos.declination_deg, pos.equation_of_time_min, noon)
