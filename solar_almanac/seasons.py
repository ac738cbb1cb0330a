"""Equinoxes and solstices (Meeus, "Astronomical Algorithms" ch. 27).

Accuracy about one minute for years 1000-3000 CE.
"""

import math

from ._types import EquinoxSolsticeSet
from .time_scales import DAYS_PER_CENTURY, J2000, jde_to_unix

# Mean JDE0 polynomial coefficients (c0..c4) in Y, tables 27.A and 27.B,
# ordered March, June, September, December.
_HISTORICAL_TERMS = (
    (1721139.29189, 365242.13740, 0.06134, 0.00111, -0.00071),
    (1721233.25401, 365241.72562, -0.05323, 0.00907, 0.00025),
    (1721325.70455, 365242.49558, -0.11677, -0.00297, 0.00074),
    (1721414.39987, 365242.88257, -0.00769, -0.00933, -0.00006),
)
_MODERN_TERMS = (
    (2451623.80984, 365242.37404, 0.05169, -0.00411, -0.00057),
    (2451716.56767, 365241.62603, 0.00325, 0.00888, -0.00030),
    (2451810.21715, 365242.01767, -0.11575, 0.00337, 0.00078),
    (2451900.05952, 365242.74049, -0.06223, -0.00823, 0.00032),
)

# Periodic terms (A, B, C) of table 27.C: A * cos(B + C * T), degrees.
_PERIODIC_TERMS = (
    (485, 324.96, 1934.136),
    (203, 337.23, 32964.467),
    (199, 342.08, 20.186),
    (182, 27.85, 445267.112),
    (156, 73.14, 45036.886),
    (136, 171.52, 22518.443),
    (77, 222.54, 65928.934),
    (74, 296.72, 3034.906),
    (70, 243.58, 9037.513),
    (58, 119.81, 33718.147),
    (52, 297.17, 150.678),
    (50, 21.02, 2281.226),
    (45, 247.54, 29929.562),
    (44, 325.15, 31555.956),
    (29, 60.93, 4443.417),
    (18, 155.12, 67555.328),
    (17, 288.79, 4562.452),
    (16, 198.04, 62894.029),
    (14, 199.76, 31436.921),
    (12, 95.39, 14577.848),
    (12, 287.11, 31931.756),
    (12, 320.81, 34777.259),
    (9, 227.73, 1222.114),
    (8, 15.45, 16859.074),
)


def _polynomial(coefficients: tuple[float, ...], y: float) -> float:
    result = 0.0
    for c in reversed(coefficients):
        result = result * y + c
    return result


def mean_jde0(year: int) -> tuple[float, float, float, float]:
    """Mean instants (JDE0) of the four cardinal points of a year."""
    if -1000 <= year <= 1000:
        y = year / 1000.0
        table = _HISTORICAL_TERMS
    else:
        y = (year - 2000) / 1000.0
        table = _MODERN_TERMS
    march, june, september, december = (_polynomial(row, y) for row in table)
    return march, june, september, december


def periodic_sum(t: float) -> float:
    """Sum S of the 24 periodic terms at Julian century T."""
    return sum(a * math.cos(math.radians(b + c * t)) for a, b, c in _PERIODIC_TERMS)


def apply_periodic_corrections(jde0: float) -> float:
    """Correct a mean JDE0 to the true instant (still Terrestrial Time).

    T must come from JDE0 itself, not from the calendar year.
    """
    t = (jde0 - J2000) / DAYS_PER_CENTURY
    w = math.radians(35999.373 * t - 2.47)
    delta_lambda = 1 + 0.0334 * math.cos(w) + 0.0007 * math.cos(2 * w)
    return jde0 + (0.00001 * periodic_sum(t)) / delta_lambda


def compute_equinoxes_solstices(year: int) -> EquinoxSolsticeSet:
    """Equinox and solstice instants of a year as UTC Unix timestamps."""
    march, june, september, december = (
        jde_to_unix(apply_periodic_corrections(jde0), year) for jde0 in mean_jde0(year)
    )
    return EquinoxSolsticeSet(
        year=year,
        march_equinox=march,
        june_solstice=june,
        september_equinox=september,
        december_solstice=december,
    )
