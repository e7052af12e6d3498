"""HTTP API of the realm calendar."""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.http import JsonResponse
from rest_framework import permissions, status
from rest_framework.exceptions import PermissionDenied
from rest_framework.exceptions import ValidationError as APIValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from .cursors import Cursor
from .definition import calendar_from_definition
from .serializers import (
    NavigateSerializer,
    SelectDateSerializer,
    TimeChangeSerializer,
    WorldTimeSerializer,
)
from .services import (
    build_sync,
    get_definition,
    load_calendar,
    local_changes_allowed,
    receive_world_time,
    store_cursors,
)
from .validators import validate_date_parts

logger = logging.getLogger(__name__)


def _is_staff(user) -> bool:
    return bool(user and user.is_active and user.is_staff)


def _check_local_changes() -> None:
    if not local_changes_allowed():
        raise PermissionDenied("The current date follows the host world clock.")


class CalendarSnapshot(APIView):
    def get(self, request):
        calendar = load_calendar(request.session)
        return Response(calendar.to_template())


class Navigate(APIView):
    def post(self, request):
        serializer = NavigateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cursor = Cursor(serializer.validated_data["cursor"])
        unit = serializer.validated_data["unit"]
        amount = serializer.validated_data["amount"]
        if cursor is Cursor.CURRENT and not _is_staff(request.user):
            raise PermissionDenied("Only staff may move the current date.")
        if cursor is Cursor.CURRENT:
            _check_local_changes()

        calendar = load_calendar(request.session)
        if unit == "year":
            calendar.change_year(amount, cursor)
        elif unit == "month":
            calendar.change_month(amount, cursor)
        else:
            calendar.change_day(amount, cursor)
        if cursor is Cursor.CURRENT:
            build_sync(calendar, request.user).commit_local_change()
        store_cursors(calendar, request.session)
        return Response(calendar.to_template())


class ChangeTime(APIView):
    permission_classes = [permissions.IsAdminUser]

    def post(self, request):
        serializer = TimeChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        _check_local_changes()
        amount = serializer.validated_data["amount"]
        calendar = load_calendar(request.session)
        calendar.change_time(amount >= 0, serializer.validated_data["unit"], abs(amount))
        build_sync(calendar, request.user).commit_local_change()
        store_cursors(calendar, request.session)
        return Response(calendar.to_template())


class SelectDate(APIView):
    def post(self, request):
        calendar = load_calendar(request.session)
        serializer = SelectDateSerializer(data=request.data, context={"calendar": calendar})
        serializer.is_valid(raise_exception=True)
        year, month, day = serializer.validated_data["date"]
        calendar.set_date(year, month, day, Cursor.SELECTED)
        calendar.set_date(year, month, day, Cursor.VISIBLE)
        store_cursors(calendar, request.session)
        return Response(calendar.to_template())


class ReceiveWorldTime(APIView):
    permission_classes = [permissions.IsAdminUser]

    def post(self, request):
        serializer = WorldTimeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        calendar = load_calendar(request.session)
        sync = build_sync(calendar, request.user)
        applied = receive_world_time(
            sync, data["total_seconds"], data["change_amount"], data.get("sequence"), combat=data["combat"]
        )
        current = calendar.current_date()
        return Response(
            {
                "applied": applied,
                "sequence": sync.last_sequence,
                "current_date": current.to_dict() if current else None,
            },
            status=status.HTTP_200_OK,
        )


class MoonPhases(APIView):
    def get(self, request, year: int, month: int, day: int):
        calendar = calendar_from_definition(get_definition())
        try:
            validate_date_parts(calendar, year, month, day)
        except ValidationError as exc:
            raise APIValidationError({"date": exc.messages}) from exc
        return Response(
            [
                {
                    "name": moon.name,
                    "color": moon.color,
                    "phase": moon.date_phase(calendar, year, month, day).to_template(),
                }
                for moon in calendar.moons
            ]
        )


def year_meta(request, year: int) -> JsonResponse:
    """Return calendar metadata for ``year``."""

    calendar = calendar_from_definition(get_definition())
    return JsonResponse(calendar.year_meta(year))
