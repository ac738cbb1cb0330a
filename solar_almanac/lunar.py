"""Moon phase instants and illumination (Meeus, "Astronomical Algorithms" ch. 49).

Phase instants are accurate to a couple of minutes over the modern era.
Instants are integer UTC Unix timestamps.
"""

import bisect
import datetime
import math
from typing import Callable

from ._types import LunarPhaseEvent, LunarPhaseWindow, PhaseKind, PhaseLabel
from .time_scales import (
    SECONDS_PER_DAY,
    jde_to_unix,
    jde_to_year,
    normalize_month,
    timestamp_to_local_date,
)

SYNODIC_MONTH_DAYS = 29.53
PHASE_EPSILON = 0.01
WINDOW_MARGIN_DAYS = 15

PHASE_OFFSETS = {
    PhaseKind.NEW: 0.0,
    PhaseKind.FIRST_QUARTER: 0.25,
    PhaseKind.FULL: 0.5,
    PhaseKind.LAST_QUARTER: 0.75,
}

_TRANSITIONS = {
    (PhaseKind.NEW, PhaseKind.FIRST_QUARTER): PhaseLabel.WAXING_CRESCENT,
    (PhaseKind.FIRST_QUARTER, PhaseKind.FULL): PhaseLabel.WAXING_GIBBOUS,
    (PhaseKind.FULL, PhaseKind.LAST_QUARTER): PhaseLabel.WANING_GIBBOUS,
    (PhaseKind.LAST_QUARTER, PhaseKind.NEW): PhaseLabel.WANING_CRESCENT,
}

# Periodic terms for New and Full Moon (tables 49.I/49.II) as
# (coefficient, power of E, multiple of M, of M', of F).
_NEW_MOON_TERMS = (
    (-0.40720, 0, 0, 1, 0),
    (0.17241, 1, 1, 0, 0),
    (0.01608, 0, 0, 2, 0),
    (0.01039, 0, 0, 0, 2),
    (0.00739, 1, -1, 1, 0),
    (-0.00514, 1, 1, 1, 0),
    (0.00208, 2, 2, 0, 0),
    (-0.00111, 0, 0, 1, -2),
    (-0.00057, 0, 0, 1, 2),
    (0.00056, 1, 1, 2, 0),
    (-0.00042, 0, 0, 3, 0),
    (0.00042, 1, 1, 0, 2),
    (0.00038, 1, 1, 0, -2),
    (-0.00024, 1, -1, 2, 0),
)
_FULL_MOON_TERMS = (
    (-0.40614, 0, 0, 1, 0),
    (0.17302, 1, 1, 0, 0),
    (0.01614, 0, 0, 2, 0),
    (0.01043, 0, 0, 0, 2),
    (0.00734, 1, -1, 1, 0),
    (-0.00515, 1, 1, 1, 0),
    (0.00209, 2, 2, 0, 0),
    (-0.00111, 0, 0, 1, -2),
    (-0.00057, 0, 0, 1, 2),
    (0.00056, 1, 1, 2, 0),
    (-0.00042, 0, 0, 3, 0),
    (0.00042, 1, 1, 0, 2),
    (0.00038, 1, 1, 0, -2),
    (-0.00024, 1, -1, 2, 0),
)
_QUARTER_TERMS = (
    (-0.62801, 0, 0, 1, 0),
    (0.17172, 1, 1, 0, 0),
    (-0.01183, 1, 1, 1, 0),
    (0.00862, 0, 0, 2, 0),
    (0.00804, 0, 0, 0, 2),
    (0.00454, 1, -1, 1, 0),
    (0.00204, 2, 2, 0, 0),
    (-0.00180, 0, 0, 1, -2),
    (-0.00070, 0, 0, 1, 2),
    (-0.00040, 0, 0, 3, 0),
    (-0.00034, 1, -1, 2, 0),
    (0.00032, 1, 1, 0, 2),
)


def lunation_number(year: int, month: int) -> int:
    """Lunation index k (0 = new moon of 2000-01-06) near mid-month."""
    return math.floor((year + (month - 0.5) / 12 - 2000) * 12.3685)


def classify_phase(offset: float) -> PhaseKind:
    """Map a fractional lunation offset to its named phase."""
    for kind, value in PHASE_OFFSETS.items():
        if abs(offset - value) < PHASE_EPSILON:
            return kind
    raise ValueError(f"Not a principal phase offset: {offset}")


def _series(terms: tuple, e: float, m: float, mp: float, f: float) -> float:
    return sum(
        coeff * e**e_power * math.sin(m_mult * m + mp_mult * mp + f_mult * f)
        for coeff, e_power, m_mult, mp_mult, f_mult in terms
    )


def _quarter_w(e: float, m: float, mp: float, f: float) -> float:
    return (
        0.00306
        - 0.00038 * e * math.cos(m)
        + 0.00026 * math.cos(mp)
        - 0.00002 * math.cos(mp - m)
        + 0.00002 * math.cos(mp + m)
        + 0.00002 * math.cos(2 * f)
    )


def phase_correction(kind: PhaseKind, k: float) -> float:
    """Periodic correction (days) to the mean phase JDE for lunation k."""
    t = k / 1236.85
    e = 1 - 0.002516 * t - 0.0000074 * t**2
    m = math.radians(2.5534 + 29.10535670 * k - 0.0000014 * t**2 - 0.00000011 * t**3)
    mp = math.radians(
        201.5643
        + 385.81693528 * k
        + 0.0107582 * t**2
        + 0.00001238 * t**3
        - 0.000000058 * t**4
    )
    f = math.radians(
        160.7108
        + 390.67050284 * k
        - 0.0016118 * t**2
        - 0.00000227 * t**3
        + 0.000000011 * t**4
    )
    omega = math.radians(124.7746 - 1.56375588 * k + 0.0020672 * t**2 + 0.00000215 * t**3)

    match kind:
        case PhaseKind.NEW:
            correction = _series(_NEW_MOON_TERMS, e, m, mp, f)
        case PhaseKind.FULL:
            correction = _series(_FULL_MOON_TERMS, e, m, mp, f)
        case PhaseKind.FIRST_QUARTER:
            correction = _series(_QUARTER_TERMS, e, m, mp, f) + _quarter_w(e, m, mp, f)
        case PhaseKind.LAST_QUARTER:
            correction = _series(_QUARTER_TERMS, e, m, mp, f) - _quarter_w(e, m, mp, f)
        case _:
            raise ValueError(f"Unknown phase: {kind}")

    # Longitude of the ascending node, listed for every phase
    correction -= 0.00017 * math.sin(omega)
    # Largest planetary argument A1
    a1 = 299.77 + 0.107408 * k - 0.009173 * t**2
    correction += 0.000325 * math.sin(math.radians(a1))
    return correction


def mean_phase_jde(k: float) -> float:
    t = k / 1236.85
    return (
        2451550.09766
        + 29.530588861 * k
        + 0.00015437 * t**2
        - 0.000000150 * t**3
        + 0.00000000073 * t**4
    )


def phase_event(k: int, offset: float) -> LunarPhaseEvent:
    """Instant of the phase at offset (0, .25, .5, .75) within lunation k."""
    kind = classify_phase(offset)
    k_adjusted = k + PHASE_OFFSETS[kind]
    jde = mean_phase_jde(k_adjusted) + phase_correction(kind, k_adjusted)
    return LunarPhaseEvent(
        phase_kind=kind,
        lunation_number=k_adjusted,
        julian_ephemeris_day=jde,
        utc_instant=jde_to_unix(jde, jde_to_year(jde)),
    )


def _month_bounds(year: int, month: int) -> tuple[int, int]:
    start = datetime.datetime(year, month, 1, tzinfo=datetime.timezone.utc)
    next_year, next_month = normalize_month(year, month + 1)
    end = datetime.datetime(next_year, next_month, 1, tzinfo=datetime.timezone.utc)
    return int(start.timestamp()), int(end.timestamp()) - 1


def phases_for_month(year: int, month: int) -> list[LunarPhaseEvent]:
    """Principal phases from 15 days before to 15 days after a month.

    Month may be 0 or 13; it rolls into the adjacent year.
    """
    k = lunation_number(year, month)
    events = [
        phase_event(k + i, offset)
        for i in (-1, 0, 1)
        for offset in PHASE_OFFSETS.values()
    ]
    events.sort(key=lambda event: event.utc_instant)

    start, end = _month_bounds(*normalize_month(year, month))
    early = start - WINDOW_MARGIN_DAYS * SECONDS_PER_DAY
    late = end + WINDOW_MARGIN_DAYS * SECONDS_PER_DAY
    return [event for event in events if early <= event.utc_instant <= late]


def illumination_pct(seconds_since_new: float) -> float:
    """Illuminated fraction (percent) from time elapsed since New Moon."""
    days = seconds_since_new / SECONDS_PER_DAY
    angle = (days / SYNODIC_MONTH_DAYS) * 2 * math.pi
    return round((1 - math.cos(angle)) * 50, 1)


def surrounding_phases(
    timestamp: int,
    utc_offset_hours: float = 0.0,
    phases_for: Callable[[int, int], list[LunarPhaseEvent]] = phases_for_month,
) -> list[LunarPhaseEvent]:
    """Principal phases of the target month and its neighbours, deduplicated."""
    local = timestamp_to_local_date(timestamp, utc_offset_hours)
    unique: dict[tuple[PhaseKind, float], LunarPhaseEvent] = {}
    for month in (local.month - 1, local.month, local.month + 1):
        for event in phases_for(*normalize_month(local.year, month)):
            unique[(event.phase_kind, event.lunation_number)] = event
    return sorted(unique.values(), key=lambda event: event.utc_instant)


def phase_at(
    timestamp: int,
    utc_offset_hours: float = 0.0,
    phases_for: Callable[[int, int], list[LunarPhaseEvent]] = phases_for_month,
) -> LunarPhaseWindow:
    """Phase label, illumination and bracketing phases at an instant.

    A principal phase falling on the same local calendar day as the instant
    takes precedence over the intermediate (crescent/gibbous) label.
    """
    events = surrounding_phases(timestamp, utc_offset_hours, phases_for)
    instants = [event.utc_instant for event in events]
    idx = bisect.bisect_right(instants, timestamp)
    prev_phase = events[idx - 1] if idx > 0 else None
    next_phase = events[idx] if idx < len(events) else None

    label = PhaseLabel.UNKNOWN
    if prev_phase and next_phase:
        label = _TRANSITIONS.get((prev_phase.phase_kind, next_phase.phase_kind), label)

    target_day = timestamp_to_local_date(timestamp, utc_offset_hours)
    for event in events:
        if timestamp_to_local_date(event.utc_instant, utc_offset_hours) == target_day:
            label = PhaseLabel(event.phase_kind.value)
            break

    if prev_phase is None or next_phase is None:
        illumination = 0.0
    else:
        new_moon = next(
            (e for e in reversed(events[:idx]) if e.phase_kind is PhaseKind.NEW), None
        )
        if new_moon is None:
            illumination = 50.0
        else:
            illumination = illumination_pct(timestamp - new_moon.utc_instant)

    return LunarPhaseWindow(
        current_phase_label=label,
        illumination_pct=illumination,
        prev_phase=prev_phase,
        next_phase=next_phase,
    )
