from realm_calendar.clock import Time
from realm_calendar.core import Calendar
from realm_calendar.leap import LeapYearRule
from realm_calendar.moons import FirstNewMoon, Moon, MoonPhase
from realm_calendar.units import Month, Season, Weekday

GREGORIAN_LENGTHS = [31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]
MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def weekdays(count: int) -> list[Weekday]:
    return [Weekday(i, f"Day {i}") for i in range(1, count + 1)]


def make_gregorian(year: int = 2024, month: int = 1, day: int = 1, **kwargs) -> Calendar:
    months = [
        Month(i, name, length, 29 if i == 2 else length)
        for i, (name, length) in enumerate(zip(MONTH_NAMES, GREGORIAN_LENGTHS), start=1)
    ]
    calendar = Calendar(
        year=year,
        months=months,
        weekdays=weekdays(7),
        leap_year_rule=LeapYearRule("gregorian"),
        time=Time(),
        name="Gregorian",
        **kwargs,
    )
    calendar.set_date(year, month, day)
    return calendar


def make_two_month(year: int = 0) -> Calendar:
    """Two months of 15 and 16 days, five weekdays, no leap years."""

    calendar = Calendar(
        year=year,
        months=[Month(1, "First", 15), Month(2, "Second", 16)],
        weekdays=weekdays(5),
    )
    calendar.set_date(year, 1, 1)
    return calendar


def make_intercalary(year: int = 1) -> Calendar:
    """Months of 10 days around a festival that only exists in leap years.

    Leap years are multiples of 4; the festival month is intercalary, so it
    never counts towards the linear day count.
    """

    calendar = Calendar(
        year=year,
        months=[
            Month(1, "Dawn", 10),
            Month(2, "Festival", 0, 1, intercalary=True),
            Month(3, "Dusk", 10),
            Month(4, "Feast", 3, 3, intercalary=True),
        ],
        weekdays=weekdays(7),
        leap_year_rule=LeapYearRule("custom", custom_mod=4),
    )
    calendar.set_date(year, 1, 1)
    return calendar


def make_moon(cycle_length: float = 30, **kwargs) -> Moon:
    kwargs.setdefault("first_new_moon", FirstNewMoon(year=2000, month=1, day=6))
    moon = Moon(
        name="Moon",
        cycle_length=cycle_length,
        phases=[
            MoonPhase("New Moon", single_day=True),
            MoonPhase("Waxing"),
            MoonPhase("Full Moon", single_day=True),
            MoonPhase("Waning"),
        ],
        **kwargs,
    )
    moon.update_phase_length()
    return moon


def default_seasons() -> list[Season]:
    return [
        Season("Spring", 3, 20, "#fffce8"),
        Season("Summer", 6, 20, "#f3fff3"),
        Season("Fall", 9, 22, "#fff7f2"),
        Season("Winter", 12, 21, "custom", custom_color="#0000ff"),
    ]
