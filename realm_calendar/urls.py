from django.urls import path, register_converter

from . import views


class SignedIntConverter:
    regex = "-?[0-9]+"

    def to_python(self, value):
        return int(value)

    def to_url(self, value):
        return str(value)


register_converter(SignedIntConverter, "sint")

app_name = "realm_calendar"

urlpatterns = [
    path("", views.CalendarSnapshot.as_view(), name="snapshot"),
    path("navigate/", views.Navigate.as_view(), name="navigate"),
    path("time/", views.ChangeTime.as_view(), name="change-time"),
    path("select/", views.SelectDate.as_view(), name="select"),
    path("world-time/", views.ReceiveWorldTime.as_view(), name="world-time"),
    path("moons/<sint:year>/<int:month>/<int:day>/", views.MoonPhases.as_view(), name="moons"),
    path("year/<sint:year>/meta/", views.year_meta, name="year-meta"),
]
