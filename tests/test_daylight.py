"""Yearly day length distribution, percentile and week summary tests."""

import datetime
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from solar_almanac._types import GeoLocation, LatitudeNote, PhaseLabel, Trend
from solar_almanac.daylight import (
    DayLengthStatistics,
    YearlyDistributionCache,
    build_distribution,
    compare_week_to_last_year,
    day_statistics,
    daylight_trend,
    distribution_key,
    latitude_notes,
    same_week_last_year,
    solstice_dates,
    summarize_week,
    week_day_lengths,
)
from solar_almanac.engines import MeeusEngine

ROME = (41.9, 12.5, 1.0)
SYDNEY = (-33.87, 151.21, 10.0)
MAPELLO = (45.7, 9.6, 1.0)
TROMSO = (69.65, 18.96, 1.0)


@pytest.fixture(scope="module")
def engine():
    return MeeusEngine()


class TestDistribution:
    @pytest.fixture(scope="class")
    def leap_year(self, engine):
        return build_distribution(engine, *ROME[:2], 2024, ROME[2])

    def test_leap_year_has_366_days(self, leap_year):
        assert len(leap_year) == 366

    def test_sorted(self, leap_year):
        assert list(leap_year.daylengths_h) == sorted(leap_year.daylengths_h)

    def test_metadata(self, leap_year):
        assert leap_year.year == 2024
        assert leap_year.latitude == 41.9
        assert leap_year.utc_offset_hours == 1.0

    def test_executor_matches_sequential(self, engine, leap_year):
        with ThreadPoolExecutor(max_workers=4) as executor:
            parallel = build_distribution(engine, *ROME[:2], 2024, ROME[2], executor)
        assert parallel == leap_year

    def test_build_logged(self, engine, caplog):
        with caplog.at_level(logging.DEBUG, logger="solar_almanac.daylight"):
            build_distribution(engine, 0.0, 0.0, 2026, 0.0)
        assert "Built 365-day daylight distribution for 0.0000:0.0000:2026:0.00" in caplog.text

    def test_key_format(self):
        assert distribution_key(45.7, 9.6, 2026, 1.0) == "45.7000:9.6000:2026:1.00"


class TestPercentile:
    @pytest.fixture(scope="class")
    def stats(self, engine):
        return DayLengthStatistics(engine)

    @pytest.mark.parametrize("daylength", [0.0, 5.0, 9.0, 12.0, 15.0, 24.0])
    def test_bounds(self, stats, daylength):
        p = stats.percentile(daylength, *ROME[:2], 2026, ROME[2])
        assert 0.0 <= p <= 100.0

    def test_extremes(self, stats):
        assert stats.percentile(0.0, *ROME[:2], 2026, ROME[2]) == 0.0
        assert stats.percentile(24.0, *ROME[:2], 2026, ROME[2]) == 100.0

    @pytest.mark.parametrize(
        "location, month, day, expected, tolerance",
        [
            (ROME, 6, 21, 100.0, 2.0),
            (ROME, 12, 21, 0.0, 1.0),
            (ROME, 3, 20, 50.0, 10.0),
            (ROME, 9, 22, 50.0, 10.0),
            (SYDNEY, 6, 21, 0.0, 1.0),
            (SYDNEY, 12, 21, 100.0, 2.0),
        ],
    )
    def test_solstices_and_equinoxes(self, stats, engine, location, month, day, expected, tolerance):
        lat, lon, offset = location
        profile = engine.sun_times(2026, month, day, lat, lon, offset)
        p = stats.percentile(profile.daylength_h, lat, lon, 2026, offset)
        assert p == pytest.approx(expected, abs=tolerance), f"{location} {month}/{day}: {p}"

    def test_distribution_cached(self, stats):
        first = stats.distribution(*ROME[:2], 2026, ROME[2])
        second = stats.distribution(*ROME[:2], 2026, ROME[2])
        assert first is second

    def test_offset_is_part_of_the_key(self, engine):
        stats = DayLengthStatistics(engine)
        stats.distribution(*ROME[:2], 2026, 1.0)
        stats.distribution(*ROME[:2], 2026, 2.0)
        assert len(stats.cache) == 2

    def test_percentile_not_rounded(self, engine):
        stats = DayLengthStatistics(engine)
        dist = stats.distribution(*ROME[:2], 2026, ROME[2])
        p = stats.percentile(dist.daylengths_h[1], *ROME[:2], 2026, ROME[2])
        assert p == pytest.approx(100.0 / 365)

    def test_cache_bounded(self, engine):
        stats = DayLengthStatistics(engine, YearlyDistributionCache(max_entries=2))
        for year in (2024, 2025, 2026):
            stats.distribution(0.0, 0.0, year, 0.0)
        assert len(stats.cache) == 2


class TestTrend:
    @pytest.mark.parametrize(
        "change, expected",
        [
            (301.0, Trend.INCREASING),
            (300.0, Trend.STABLE),
            (0.0, Trend.STABLE),
            (-300.0, Trend.STABLE),
            (-301.0, Trend.DECREASING),
        ],
    )
    def test_threshold(self, change, expected):
        assert daylight_trend(change) is expected


class TestWeekSummary:
    def test_aggregates(self):
        start = datetime.date(2026, 1, 1)
        lengths = [(start + datetime.timedelta(days=i), 30000.0 + 100.0 * i) for i in range(7)]
        summary = summarize_week(lengths, PhaseLabel.WAXING_CRESCENT)
        assert summary.avg_length_s == pytest.approx(30300.0)
        assert summary.min_length_s == 30000.0
        assert summary.max_length_s == 30600.0
        assert summary.total_change_s == 600.0
        assert summary.trend is Trend.INCREASING
        assert summary.shortest_day == start
        assert summary.longest_day == datetime.date(2026, 1, 7)
        assert summary.moon_phase is PhaseLabel.WAXING_CRESCENT

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            summarize_week([], PhaseLabel.UNKNOWN)

    def test_spring_week_lengthens(self, engine):
        lengths = week_day_lengths(engine, datetime.date(2026, 3, 16), *MAPELLO)
        assert [d for d, _ in lengths][-1] == datetime.date(2026, 3, 22)
        summary = summarize_week(lengths, PhaseLabel.UNKNOWN)
        assert summary.trend is Trend.INCREASING
        assert summary.shortest_day == datetime.date(2026, 3, 16)

    def test_autumn_week_shortens(self, engine):
        lengths = week_day_lengths(engine, datetime.date(2026, 9, 20), *MAPELLO)
        assert summarize_week(lengths, PhaseLabel.UNKNOWN).trend is Trend.DECREASING

    def test_solstice_week_stable(self, engine):
        lengths = week_day_lengths(engine, datetime.date(2026, 6, 18), *MAPELLO)
        assert summarize_week(lengths, PhaseLabel.UNKNOWN).trend is Trend.STABLE


class TestLatitudeNotes:
    @pytest.mark.parametrize(
        "lat, expected",
        [
            (70.0, (LatitudeNote.ARCTIC,)),
            (-70.0, (LatitudeNote.ANTARCTIC,)),
            (66.5, (LatitudeNote.HIGH_LATITUDE,)),
            (-62.0, (LatitudeNote.HIGH_LATITUDE,)),
            (60.0, ()),
            (45.7, ()),
            (20.0, (LatitudeNote.TROPICAL,)),
            (0.0, (LatitudeNote.TROPICAL, LatitudeNote.EQUATORIAL)),
            (-3.0, (LatitudeNote.TROPICAL, LatitudeNote.EQUATORIAL)),
        ],
    )
    def test_notes(self, lat, expected):
        assert latitude_notes(lat) == expected


class TestTromsoPercentile:
    """Polar day and polar night both appear in the year's distribution."""

    @pytest.fixture(scope="class")
    def stats(self, engine):
        return DayLengthStatistics(engine)

    def test_distribution_spans_whole_day(self, stats):
        dist = stats.distribution(*TROMSO[:2], 2026, TROMSO[2])
        assert dist.daylengths_h[0] == 0.0
        assert dist.daylengths_h[-1] == 24.0

    @pytest.mark.parametrize("daylength", [0.0, 5.0, 12.0, 20.0, 24.0])
    def test_bounds(self, stats, daylength):
        p = stats.percentile(daylength, *TROMSO[:2], 2026, TROMSO[2])
        assert 0.0 <= p <= 100.0

    def test_polar_night_ranks_lowest(self, stats, engine):
        profile = engine.sun_times(2026, 12, 21, *TROMSO)
        assert stats.percentile(profile.daylength_h, *TROMSO[:2], 2026, TROMSO[2]) == 0.0

    def test_midnight_sun_ranks_high(self, stats, engine):
        profile = engine.sun_times(2026, 6, 21, *TROMSO)
        assert stats.percentile(profile.daylength_h, *TROMSO[:2], 2026, TROMSO[2]) > 50.0


class TestDayStatistics:
    @pytest.fixture(scope="class")
    def stats(self, engine):
        return DayLengthStatistics(engine)

    @pytest.fixture(scope="class")
    def equinox(self, engine, stats):
        return day_statistics(
            engine, stats, datetime.date(2026, 3, 20), GeoLocation(*MAPELLO[:2]), MAPELLO[2]
        )

    def test_day_and_night_fill_the_day(self, equinox):
        assert equinox.daylight_s + equinox.night_s == 86400
        assert equinox.daylight_pct + equinox.night_pct == pytest.approx(100.0, abs=0.1)

    def test_change_from_previous_day(self, engine, equinox):
        previous = engine.sun_times(2026, 3, 19, *MAPELLO)
        assert equinox.day_change_s == equinox.daylight_s - round(previous.daylength_h * 3600)
        assert 170 < equinox.day_change_s < 220
        assert equinox.night_change_s == -equinox.day_change_s

    def test_percentiles_complement(self, equinox):
        assert equinox.daylight_percentile == pytest.approx(50.0, abs=10.0)
        assert equinox.night_percentile == pytest.approx(100.0 - equinox.daylight_percentile)

    def test_northern_solstices(self, equinox):
        assert equinox.winter_solstice == datetime.date(2026, 12, 21)
        assert equinox.summer_solstice == datetime.date(2026, 6, 21)
        assert equinox.diff_from_winter_s > 0
        assert equinox.diff_from_summer_s < 0

    def test_southern_solstices_swap(self, engine, stats):
        s = day_statistics(
            engine, stats, datetime.date(2026, 3, 20), GeoLocation(*SYDNEY[:2]), SYDNEY[2]
        )
        assert s.winter_solstice == datetime.date(2026, 6, 21)
        assert s.summer_solstice == datetime.date(2026, 12, 22)
        assert s.diff_from_winter_s > 0
        assert s.diff_from_summer_s < 0

    def test_on_the_winter_solstice(self, engine, stats):
        _, december = solstice_dates(2026, MAPELLO[2])
        s = day_statistics(engine, stats, december, GeoLocation(*MAPELLO[:2]), MAPELLO[2])
        assert s.winter_solstice == december
        assert s.diff_from_winter_s == 0
        assert s.daylight_percentile == pytest.approx(0.0, abs=1.0)

    def test_polar_night_is_all_night(self, engine, stats):
        s = day_statistics(
            engine, stats, datetime.date(2026, 12, 21), GeoLocation(*TROMSO[:2]), TROMSO[2]
        )
        assert s.daylight_s == 0
        assert s.night_s == 86400
        assert s.night_pct == 100.0
        assert s.daylight_percentile == 0.0


class TestSolsticeDates:
    @pytest.mark.parametrize(
        "offset, expected",
        [
            (0.0, (datetime.date(2026, 6, 21), datetime.date(2026, 12, 21))),
            (10.0, (datetime.date(2026, 6, 21), datetime.date(2026, 12, 22))),
            (-10.0, (datetime.date(2026, 6, 20), datetime.date(2026, 12, 21))),
        ],
    )
    def test_local_dates(self, offset, expected):
        assert solstice_dates(2026, offset) == expected


class TestSameWeekLastYear:
    @pytest.mark.parametrize(
        "week_start, expected",
        [
            (datetime.date(2026, 3, 16), datetime.date(2025, 3, 16)),
            (datetime.date(2026, 10, 18), datetime.date(2025, 10, 12)),
            (datetime.date(2024, 2, 29), datetime.date(2023, 2, 26)),
        ],
    )
    def test_previous_sunday(self, week_start, expected):
        earlier = same_week_last_year(week_start)
        assert earlier == expected
        assert earlier.weekday() == 6

    def test_result_always_a_sunday(self):
        start = datetime.date(2026, 1, 1)
        for offset in range(0, 365, 11):
            assert same_week_last_year(start + datetime.timedelta(days=offset)).weekday() == 6


class TestCompareWeekToLastYear:
    def test_spring_week_longer_than_earlier_week(self, engine):
        c = compare_week_to_last_year(
            engine, datetime.date(2026, 3, 15), GeoLocation(*MAPELLO[:2]), MAPELLO[2]
        )
        assert c.last_year_week_start == datetime.date(2025, 3, 9)
        assert c.difference_s == pytest.approx(c.avg_length_s - c.last_year_avg_length_s)
        assert 800 < c.difference_s < 1500

    def test_average_matches_week_lengths(self, engine):
        start = datetime.date(2026, 3, 15)
        c = compare_week_to_last_year(engine, start, GeoLocation(*MAPELLO[:2]), MAPELLO[2])
        lengths = week_day_lengths(engine, start, *MAPELLO)
        summary = summarize_week(lengths, PhaseLabel.UNKNOWN)
        assert c.avg_length_s == pytest.approx(summary.avg_length_s)

    def test_equator_barely_changes(self, engine):
        equator = GeoLocation(0.0, 0.0)
        c = compare_week_to_last_year(engine, datetime.date(2026, 3, 15), equator, 0.0)
        assert abs(c.difference_s) < 60
