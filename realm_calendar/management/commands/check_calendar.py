from __future__ import annotations

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from realm_calendar import conf
from realm_calendar.definition import calendar_from_definition, load_definition_file


class Command(BaseCommand):
    help = "Validate a calendar definition and print the shape of a year"

    def add_arguments(self, parser):
        parser.add_argument("--file", dest="path", default=None, help="Definition JSON (default: configured)")
        parser.add_argument("--year", type=int, default=None, help="Year to describe (default: current)")

    def handle(self, *args, **opts):
        path = opts["path"] or conf.DEFINITION
        try:
            calendar = calendar_from_definition(load_definition_file(path))
        except ValidationError as exc:
            raise CommandError("; ".join(exc.messages)) from exc

        year = calendar.year if opts["year"] is None else opts["year"]
        meta = calendar.year_meta(year)
        self.stdout.write(f"{calendar.name or path}: {len(calendar.months)} months, {len(calendar.weekdays)} weekdays")
        self.stdout.write(
            f"{meta['display']}: {meta['year_length']} days" + (" (leap year)" if meta["is_leap_year"] else "")
        )
        for name, length in zip(meta["month_names"], meta["month_lengths"]):
            self.stdout.write(f"  {name}: {length}")
        for moon in calendar.moons:
            self.stdout.write(f"  moon {moon.name}: {moon.phase_for(calendar).name}")
        self.stdout.write(self.style.SUCCESS("Calendar definition OK"))
