import json
from io import StringIO

import pytest
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import RequestFactory

from . import services
from .context_processors import calendar_snapshot
from .definition import calendar_from_definition
from .utils import format_realm_date, parse_realm_date


@pytest.fixture
def calendar():
    return calendar_from_definition(services.get_definition())


def test_parse_realm_date(calendar):
    assert parse_realm_date("2024-02-29", calendar) == (2024, 2, 29)
    assert parse_realm_date(" -12-3-4 ", calendar) == (-12, 3, 4)
    assert parse_realm_date(("2023", "12", "31"), calendar) == (2023, 12, 31)


@pytest.mark.parametrize("value", ["2023-02-29", "2024-13-01", "29-02-2024", "", None, ("a", 1, 1)])
def test_parse_realm_date_rejects(value, calendar):
    with pytest.raises(ValidationError):
        parse_realm_date(value, calendar)


def test_format_realm_date():
    assert format_realm_date(24, 3, 9) == "0024-03-09"
    assert format_realm_date(-5, 12, 1) == "-0005-12-01"


@pytest.mark.django_db
def test_context_processor_exposes_snapshot():
    request = RequestFactory().get("/")
    request.session = {}
    ctx = calendar_snapshot(request)
    assert ctx["REALM_CALENDAR"]["name"] == "Gregorian"
    assert json.loads(ctx["REALM_CALENDAR_JSON"])["numeric"] == 2024


def test_context_processor_survives_broken_definition(monkeypatch):
    def broken(session=None):
        raise ValidationError("broken")

    monkeypatch.setattr(services, "load_calendar", broken)
    ctx = calendar_snapshot(RequestFactory().get("/"))
    assert ctx == {"REALM_CALENDAR": {}, "REALM_CALENDAR_JSON": "{}"}


def test_check_calendar_command():
    out = StringIO()
    call_command("check_calendar", "--year", "2023", stdout=out)
    text = out.getvalue()
    assert "2023: 365 days" in text
    assert "February: 28" in text
    assert "Calendar definition OK" in text


def test_check_calendar_command_reports_problems(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"months": [], "time": {"hours_in_day": 0}}), encoding="utf-8")
    with pytest.raises(CommandError, match="Month list is empty"):
        call_command("check_calendar", "--file", str(path))
