"""Interchangeable sun-times engines and their one-time selection.

``meeus`` is the built-in formula set of :mod:`solar_almanac.solar`.
``astral`` takes declination, equation of time and transit from the astral
package and applies the same hour-angle and polar rules. The engine is
picked once, when an Almanac is built; a requested engine whose library is
missing is a fatal ComputationUnavailable, never a silent substitution.
"""

import datetime
import importlib.util
import logging
from typing import Protocol

from ._types import SolarDayProfile
from .solar import build_profile, compute_sun_times
from .time_scales import julian_century, julian_day, utc_offset_tz

logger = logging.getLogger(__name__)

DEFAULT_ENGINE = "meeus"


class ComputationUnavailable(RuntimeError):
    """A requested computation backend is not installed."""


class SolarEngine(Protocol):
    name: str

    def sun_times(
        self,
        year: int,
        month: int,
        day: int,
        latitude: float,
        longitude: float,
        utc_offset_hours: float,
    ) -> SolarDayProfile: ...


class MeeusEngine:
    name = "meeus"

    def sun_times(
        self,
        year: int,
        month: int,
        day: int,
        latitude: float,
        longitude: float,
        utc_offset_hours: float,
    ) -> SolarDayProfile:
        return compute_sun_times(year, month, day, latitude, longitude, utc_offset_hours)


class AstralEngine:
    name = "astral"

    def __init__(self):
        from astral import Observer
        from astral import sun

        self._observer = Observer
        self._sun = sun

    def sun_times(
        self,
        year: int,
        month: int,
        day: int,
        latitude: float,
        longitude: float,
        utc_offset_hours: float,
    ) -> SolarDayProfile:
        t = julian_century(julian_day(year, month, day, 12.0 - utc_offset_hours))
        declination = self._sun.sun_declination(t)
        eot = self._sun.eq_of_time(t)

        tz = utc_offset_tz(utc_offset_hours)
        observer = self._observer(latitude=latitude, longitude=longitude)
        transit = self._sun.noon(observer, datetime.date(year, month, day), tzinfo=tz)
        midnight = datetime.datetime(year, month, day, tzinfo=tz)
        # Transit may land on the neighbouring civil day across the date line
        noon = ((transit - midnight).total_seconds() / 86400.0) % 1.0
        return build_profile(latitude, declination, eot, noon)


_ENGINES = {
    MeeusEngine.name: (MeeusEngine, None),
    AstralEngine.name: (AstralEngine, "astral"),
}


def engine_names() -> tuple[str, ...]:
    return tuple(_ENGINES)


def available_engines() -> tuple[str, ...]:
    """Engines whose backing library can be imported in this process."""
    return tuple(
        name
        for name, (_, module) in _ENGINES.items()
        if module is None or importlib.util.find_spec(module) is not None
    )


def select_engine(name: str = DEFAULT_ENGINE) -> SolarEngine:
    """Instantiate the named engine after checking its library is present.

    Raises:
        ValueError: unknown engine name
        ComputationUnavailable: the engine's library is not installed
    """
    try:
        factory, module = _ENGINES[name]
    except KeyError:
        raise ValueError(
            f"Unknown solar engine {name!r}; expected one of {engine_names()}"
        ) from None
    if name not in available_engines():
        raise ComputationUnavailable(
            f"Solar engine {name!r} requires the {module!r} package; "
            f"install it or configure engine={DEFAULT_ENGINE!r}"
        )
    logger.info("Using %s solar engine", name)
    return factory()
