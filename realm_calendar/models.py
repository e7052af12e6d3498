from django.db import models


class CalendarState(models.Model):
    """Authoritative current date of a calendar, one row per ``key``."""

    key = models.CharField(max_length=64, unique=True, default="default")
    year = models.IntegerField(default=0)
    month = models.IntegerField(default=1)
    day = models.IntegerField(default=1)
    hour = models.PositiveIntegerField(default=0)
    minute = models.PositiveIntegerField(default=0)
    second = models.PositiveIntegerField(default=0)
    sequence = models.PositiveBigIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["key"]

    def __str__(self):
        return f"{self.key}: {self.year}-{self.month:02d}-{self.day:02d}"


class WorldTime(models.Model):
    """Mirror of the host world clock, in seconds."""

    key = models.CharField(max_length=64, unique=True, default="default")
    total_seconds = models.BigIntegerField(default=0)
    sequence = models.PositiveBigIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["key"]

    def __str__(self):
        return f"{self.key}: {self.total_seconds}s"
