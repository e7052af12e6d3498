from pathlib import Path

from django.conf import settings

DEFAULT_DEFINITION = Path(__file__).resolve().parent / "data" / "default_calendar.json"

DEFINITION = getattr(settings, "REALM_CALENDAR_DEFINITION", DEFAULT_DEFINITION)
TIME_INTEGRATION = getattr(settings, "REALM_CALENDAR_TIME_INTEGRATION", "self")
PRIMARY = getattr(settings, "REALM_CALENDAR_PRIMARY", True)
STATE_KEY = getattr(settings, "REALM_CALENDAR_STATE_KEY", "default")
SESSION_KEY = getattr(settings, "REALM_CALENDAR_SESSION_KEY", "realm_calendar_cursors")
