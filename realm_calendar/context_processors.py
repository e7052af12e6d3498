"""Context processors for the realm calendar."""

import json
import logging

from django.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


def calendar_snapshot(request):
    """Expose the calendar snapshot of the current session to templates."""

    from .services import load_calendar

    session = getattr(request, "session", None)
    try:
        snapshot = load_calendar(session).to_template()
    except ValidationError:
        logger.exception("Calendar definition cannot be loaded")
        snapshot = {}
    return {
        "REALM_CALENDAR": snapshot,
        "REALM_CALENDAR_JSON": json.dumps(snapshot),
    }
