import pytest
from django.urls import reverse

from realm_calendar import conf
from realm_calendar.models import CalendarState, WorldTime
from realm_calendar.services import load_calendar

pytestmark = pytest.mark.django_db


def navigate(client, **data):
    return client.post(reverse("realm_calendar:navigate"), data, content_type="application/json")


def test_snapshot(client):
    resp = client.get(reverse("realm_calendar:snapshot"))
    assert resp.status_code == 200
    data = resp.json()
    assert data["display"] == "2024"
    assert data["current_date"]["day"] == 1
    assert data["visible_month"]["name"] == "January"
    assert data["current_season_name"] == "Winter"
    assert len(data["weeks"][0]) == 7
    assert data["moons"][0]["name"] == "Moon"


def test_browsing_is_remembered_in_the_session(client):
    resp = navigate(client, cursor="visible", unit="month", amount=-1)
    assert resp.status_code == 200
    assert resp.json()["visible_month"]["name"] == "December"
    assert resp.json()["display"] == "2023"

    again = client.get(reverse("realm_calendar:snapshot")).json()
    assert again["visible_month"]["name"] == "December"
    assert again["current_date"]["year"] == 2024


def test_visitors_cannot_move_the_current_date(client):
    assert navigate(client, cursor="current", unit="day", amount=1).status_code == 403
    assert not CalendarState.objects.exists()


def test_invalid_navigation(client):
    assert navigate(client, cursor="visible", unit="day").status_code == 400
    assert navigate(client, cursor="nowhere", unit="month").status_code == 400
    assert navigate(client, unit="decade").status_code == 400


def test_staff_moves_current_date(admin_client, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        resp = navigate(admin_client, cursor="current", unit="day", amount=31)
    assert resp.status_code == 200
    assert resp.json()["current_date"]["month"] == 2
    state = CalendarState.objects.get()
    assert (state.month, state.day) == (2, 1)
    expected = load_calendar().date_to_seconds(2024, 2, 1)
    assert WorldTime.objects.get().total_seconds == expected


def test_time_changes_are_staff_only(client, admin_client, django_capture_on_commit_callbacks):
    url = reverse("realm_calendar:change-time")
    assert client.post(url, {"unit": "hour", "amount": 1}).status_code == 403

    with django_capture_on_commit_callbacks(execute=True):
        resp = admin_client.post(url, {"unit": "minute", "amount": -30})
    assert resp.status_code == 200
    data = resp.json()
    assert data["current_time"] == {"hour": "23", "minute": "30", "second": "00"}
    assert data["current_date"]["year"] == 2023
    assert admin_client.post(url, {"unit": "fortnight"}).status_code == 400


def test_select_date(client):
    url = reverse("realm_calendar:select")
    assert client.post(url, {"date": "2024-02-30"}).status_code == 400
    assert client.post(url, {"date": "tomorrow"}).status_code == 400

    resp = client.post(url, {"date": "2024-02-29"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["selected_display_month"] == "February"
    assert data["selected_display_day"] == "29"
    assert data["visible_month"]["name"] == "February"
    assert [d["numeric"] for d in data["visible_month"]["days"] if d["selected"]] == [29]


def test_world_time_notifications(admin_client, monkeypatch):
    monkeypatch.setattr(conf, "TIME_INTEGRATION", "third-party")
    url = reverse("realm_calendar:world-time")
    target = load_calendar().date_to_seconds(2024, 3, 1, 6, 0, 0)

    resp = admin_client.post(url, {"total_seconds": target, "change_amount": 60, "sequence": 3})
    assert resp.status_code == 200
    assert resp.json()["applied"] is True
    assert resp.json()["current_date"]["month"] == 3

    stale = admin_client.post(url, {"total_seconds": target + 86_400, "change_amount": 60, "sequence": 3})
    assert stale.json()["applied"] is False
    assert CalendarState.objects.get().day == 1


def test_world_time_needs_staff(client):
    url = reverse("realm_calendar:world-time")
    assert client.post(url, {"total_seconds": 1, "change_amount": 1}).status_code == 403


def test_moon_phases_for_a_date(client):
    resp = client.get(reverse("realm_calendar:moons", args=[2000, 1, 6]))
    assert resp.status_code == 200
    [moon] = resp.json()
    assert moon["name"] == "Moon"
    assert moon["phase"]["name"] in {"New Moon", "Waxing Crescent"}

    assert client.get(reverse("realm_calendar:moons", args=[2023, 2, 29])).status_code == 400
    assert client.get(reverse("realm_calendar:moons", args=[2023, 13, 1])).status_code == 400


def test_year_meta(client):
    data = client.get(reverse("realm_calendar:year-meta", args=[2024])).json()
    assert data["is_leap_year"] is True
    assert data["year_length"] == 366
    assert data["month_lengths"][1] == 29

    data = client.get(reverse("realm_calendar:year-meta", args=[-1])).json()
    assert data["year"] == -1
    assert data["year_length"] == 365


def test_combat_turns_move_an_arbitrating_calendar(admin_client):
    url = reverse("realm_calendar:world-time")
    target = load_calendar().date_to_seconds(2024, 1, 1, 0, 0, 6)

    plain = admin_client.post(url, {"total_seconds": target, "change_amount": 6}, content_type="application/json")
    assert plain.json()["applied"] is False
    assert not CalendarState.objects.exists()

    resp = admin_client.post(
        url, {"total_seconds": target, "change_amount": 6, "combat": True}, content_type="application/json"
    )
    assert resp.status_code == 200
    assert resp.json()["applied"] is True
    state = CalendarState.objects.get()
    assert (state.day, state.minute, state.second) == (1, 0, 6)


def test_host_owned_date_cannot_be_moved_locally(admin_client, monkeypatch):
    monkeypatch.setattr(conf, "TIME_INTEGRATION", "third-party")
    assert navigate(admin_client, cursor="current", unit="day", amount=1).status_code == 403
    url = reverse("realm_calendar:change-time")
    assert admin_client.post(url, {"unit": "hour", "amount": 1}).status_code == 403
    assert not CalendarState.objects.exists()
    assert not WorldTime.objects.exists()

    assert navigate(admin_client, cursor="visible", unit="month", amount=1).status_code == 200
