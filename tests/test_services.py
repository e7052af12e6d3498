import pytest
from django.contrib.auth.models import AnonymousUser, User

from realm_calendar import conf, services
from realm_calendar.cursors import Cursor
from realm_calendar.models import CalendarState, WorldTime

pytestmark = pytest.mark.django_db


@pytest.fixture
def staff():
    return User.objects.create_user("keeper", password="x", is_staff=True)


def test_fresh_calendar_starts_at_definition_date():
    cal = services.load_calendar()
    d = cal.current_date()
    assert (d.year, d.month, d.day) == (2024, 1, 1)


def test_persistence_needs_active_staff(staff):
    assert services.DatabasePersistence(staff).is_elevated_user()
    assert not services.DatabasePersistence(AnonymousUser()).is_elevated_user()
    assert not services.DatabasePersistence(None).is_elevated_user()
    staff.is_active = False
    assert not services.DatabasePersistence(staff).is_elevated_user()


def test_saved_date_is_restored(staff):
    cal = services.load_calendar()
    cal.set_date(2030, 5, 6)
    cal.time.set_time(7, 8, 9)
    persistence = services.DatabasePersistence(staff)
    persistence.save_authoritative_date(cal)
    state = persistence.save_authoritative_date(cal)
    assert state.sequence == 2

    again = services.load_calendar()
    d = again.current_date()
    assert (d.year, d.month, d.day, d.hour, d.minute, d.second) == (2030, 5, 6, 7, 8, 9)
    assert again.year_of(Cursor.SELECTED) == 2030
    assert again.position(Cursor.VISIBLE).month == 4


def test_session_keeps_ui_cursors():
    session = {}
    cal = services.load_calendar(session)
    cal.change_month(3, Cursor.VISIBLE)
    cal.set_date(2024, 2, 14, Cursor.SELECTED)
    services.store_cursors(cal, session)
    assert set(session[conf.SESSION_KEY]) == {"selected", "visible"}

    again = services.load_calendar(session)
    assert again.position(Cursor.VISIBLE).month == 3
    sel = again.position(Cursor.SELECTED)
    assert (sel.month, sel.day) == (1, 13)
    assert again.current_date().month == 1


def test_push_notifies_after_commit(django_capture_on_commit_callbacks):
    received = []
    clock = services.DatabaseWorldClock(notify=lambda *args: received.append(args))
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        clock.push_world_time(100)
        assert received == []
    assert len(callbacks) == 1
    assert received == [(100, 100, 1)]

    with django_capture_on_commit_callbacks(execute=True):
        clock.push_world_time(40)
    assert received[-1] == (40, -60, 2)
    assert WorldTime.objects.get(key=conf.STATE_KEY).total_seconds == 40


def test_local_change_is_saved_pushed_and_echoed(staff, django_capture_on_commit_callbacks):
    cal = services.load_calendar()
    sync = services.build_sync(cal, staff)
    cal.change_time(True, "hour", 3)
    with django_capture_on_commit_callbacks(execute=True):
        pushed = sync.commit_local_change()
        assert cal.time_change_triggered

    assert not cal.time_change_triggered
    assert cal.time.hour == 3
    assert WorldTime.objects.get().total_seconds == pushed
    assert sync.last_sequence == 1
    state = CalendarState.objects.get()
    assert state.hour == 3
    assert state.sequence == 2


def test_received_world_time_is_mirrored(staff, monkeypatch):
    monkeypatch.setattr(conf, "TIME_INTEGRATION", "third-party")
    cal = services.load_calendar()
    sync = services.build_sync(cal, staff)
    target = cal.date_to_seconds(2024, 8, 9, 10, 11, 12)
    assert services.receive_world_time(sync, target, 500, sequence=7)
    mirror = WorldTime.objects.get()
    assert (mirror.total_seconds, mirror.sequence) == (target, 7)
    assert CalendarState.objects.get().month == 8

    assert not services.receive_world_time(sync, target + 1, 1, sequence=7)
    assert WorldTime.objects.get().total_seconds == target


def test_combat_turn_is_applied_by_an_arbiter(staff):
    cal = services.load_calendar()
    sync = services.build_sync(cal, staff)
    target = cal.date_to_seconds(2024, 1, 2)
    assert not services.receive_world_time(sync, target, 86_400, sequence=1)
    assert services.receive_world_time(sync, target, 86_400, sequence=2, combat=True)
    assert cal.current_date().day == 2
    assert not cal.combat_change_triggered
    assert CalendarState.objects.get().day == 2


@pytest.mark.parametrize(
    "integration, allowed", [("none", True), ("self", True), ("mixed", True), ("third-party", False)]
)
def test_local_changes_allowed(monkeypatch, integration, allowed):
    monkeypatch.setattr(conf, "TIME_INTEGRATION", integration)
    assert services.local_changes_allowed() is allowed


def test_definition_cache_returns_copies():
    first = services.get_definition()
    first["name"] = "Changed"
    assert services.get_definition()["name"] == "Gregorian"
