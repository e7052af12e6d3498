import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class RealmCalendarConfig(AppConfig):
    name = "realm_calendar"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self) -> None:
        from .definition import calendar_from_definition
        from .services import get_definition

        # A broken definition fails startup instead of the first request.
        calendar = calendar_from_definition(get_definition())
        logger.debug("Calendar %r ready (%s months)", calendar.name, len(calendar.months))
