from __future__ import annotations

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from .core import TIME_UNITS
from .cursors import Cursor
from .utils import parse_realm_date

NAVIGATION_UNITS = ("year", "month", "day")


class NavigateSerializer(serializers.Serializer):
    cursor = serializers.ChoiceField(choices=[c.value for c in Cursor], default=Cursor.VISIBLE.value)
    unit = serializers.ChoiceField(choices=NAVIGATION_UNITS)
    amount = serializers.IntegerField(default=1)

    def validate(self, attrs):
        if attrs["unit"] == "day" and attrs["cursor"] == Cursor.VISIBLE.value:
            raise serializers.ValidationError({"cursor": "The visible cursor cannot move by days."})
        return attrs


class TimeChangeSerializer(serializers.Serializer):
    unit = serializers.ChoiceField(choices=TIME_UNITS)
    amount = serializers.IntegerField(default=1)


class SelectDateSerializer(serializers.Serializer):
    date = serializers.CharField()

    def validate_date(self, value):
        try:
            return parse_realm_date(value, self.context["calendar"])
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.messages) from exc


class WorldTimeSerializer(serializers.Serializer):
    total_seconds = serializers.IntegerField()
    change_amount = serializers.IntegerField()
    sequence = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    combat = serializers.BooleanField(required=False, default=False)
