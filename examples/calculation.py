"""Print a one-day almanac for Mapello (BG), Italy on February 1."""

from datetime import date, datetime, timezone

from solar_almanac.almanac import Almanac, config_from_env
from solar_almanac.daylight import latitude_notes
from solar_almanac.time_scales import day_of_year_info, fraction_to_timestamp, utc_offset_tz


def clock(year, month, day, frac, offset):
    ts = fraction_to_timestamp(year, month, day, frac, offset)
    return datetime.fromtimestamp(ts, tz=utc_offset_tz(offset)).strftime("%H:%M")


def utc_str(ts):
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def main():
    latitude = 45.7
    longitude = 9.6
    offset = 1.0
    year, month, day = 2026, 2, 1

    almanac = Almanac(config_from_env())
    p = almanac.sun_times(year, month, day, latitude, longitude, offset)
    doy, total = day_of_year_info(year, month, day)

    print("=== Solar Almanac Example ===")
    print(f"Location: Mapello ({latitude:.1f}°N, {longitude:.1f}°E), UTC+{offset:g}")
    print(f"Date: {year}-{month:02d}-{day:02d} (day {doy} of {total})")
    notes = ", ".join(latitude_notes(latitude)) or "none"
    print(f"Latitude notes: {notes}")
    print()
    print("--- Sun ---")
    print(f"Declination: {p.declination_deg:.2f}°")
    print(f"Equation of Time: {p.equation_of_time_min:.2f} minutes")
    print(f"Astronomical dawn: {clock(year, month, day, p.astro_begin_frac, offset)}")
    print(f"Nautical dawn: {clock(year, month, day, p.nautical_begin_frac, offset)}")
    print(f"Civil dawn: {clock(year, month, day, p.civil_begin_frac, offset)}")
    print(f"Sunrise: {clock(year, month, day, p.sunrise_frac, offset)}")
    print(f"Solar noon: {clock(year, month, day, p.solar_noon_frac, offset)}")
    print(f"Sunset: {clock(year, month, day, p.sunset_frac, offset)}")
    print(f"Civil dusk: {clock(year, month, day, p.civil_end_frac, offset)}")
    hours = int(p.daylength_h)
    minutes = round((p.daylength_h - hours) * 60)
    print(f"Day length: {hours}h {minutes:02d}m")
    pct = almanac.percentile(p.daylength_h, latitude, longitude, year, offset)
    print(f"Longer than {pct:.1f}% of the days in {year}")
    print()
    print("--- Seasons ---")
    for name, ts in almanac.equinoxes_solstices(year).as_dict().items():
        print(f"{name.replace('_', ' ').title()}: {utc_str(ts)}")
    print()
    print("--- Moon ---")
    window = almanac.phase_at(fraction_to_timestamp(year, month, day, 0.5, offset), offset)
    print(f"Phase: {window.current_phase_label} ({window.illumination_pct:.1f}% illuminated)")
    for event in almanac.phases_for_month(year, month):
        print(f"{event.phase_kind}: {utc_str(event.utc_instant)}")
    print()
    print("--- Week ahead ---")
    week = almanac.week_summary(date(year, month, day), latitude, longitude, offset)
    print(f"Average day length: {week.avg_length_s / 3600:.2f} h")
    print(f"Change over the week: {week.total_change_s / 60:+.1f} minutes ({week.trend})")


if __name__ == "__main__":
    main()
