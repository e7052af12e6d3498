from django.contrib import admin

from .models import CalendarState, WorldTime


@admin.register(CalendarState)
class CalendarStateAdmin(admin.ModelAdmin):
    list_display = ("key", "year", "month", "day", "hour", "minute", "second", "sequence", "updated_at")
    readonly_fields = ("sequence", "updated_at")


@admin.register(WorldTime)
class WorldTimeAdmin(admin.ModelAdmin):
    list_display = ("key", "total_seconds", "sequence", "updated_at")
    readonly_fields = ("sequence", "updated_at")
