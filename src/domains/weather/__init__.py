"""Weather Domain - forecast and historical weather tools.

Weather is available for a Leaf user's field or for an arbitrary
latitude/longitude, as daily or hourly series.
"""

from typing import Any

from shared.models import HttpMethod
from domains.base import RESTDomain, string_param

INTERVAL = {
    "type": "string",
    "enum": ["daily", "hourly"],
    "description": "Series granularity"
}

SERIES_FILTERS: dict[str, Any] = {
    "startTime": string_param("Series start (ISO-8601 date or date-time)"),
    "endTime": string_param("Series end (ISO-8601 date or date-time)"),
    "model": string_param("Weather model to use, if the provider offers several"),
    "units": string_param("Unit system, e.g. 'metric' or 'imperial'"),
}

SERIES_DOC = (
    "Optional 'startTime'/'endTime' bound the series; 'model' and 'units' "
    "select the weather model and unit system."
)


class WeatherDomain(RESTDomain):
    """Tools for the Leaf Weather service."""

    name = "weather"
    description = "Field and point weather"

    def _define_tools(self) -> None:
        for dataset in ("forecast", "historical"):
            label = dataset.capitalize()

            self._add_tool(
                name=f"getFieldWeather{label}",
                description=f"{label} weather for a field, daily or hourly. " + SERIES_DOC,
                method=HttpMethod.GET,
                path=(
                    "weather/api/users/{leafUserId}/weather/"
                    f"{dataset}/field/{{fieldId}}/{{interval}}"
                ),
                properties={
                    "leafUserId": string_param("Leaf user owning the field"),
                    "fieldId": string_param("Field ID"),
                    "interval": INTERVAL,
                    **SERIES_FILTERS,
                },
                required=["leafUserId", "fieldId", "interval"],
            )

            self._add_tool(
                name=f"getPointWeather{label}",
                description=(
                    f"{label} weather for a latitude/longitude, daily or "
                    "hourly. " + SERIES_DOC
                ),
                method=HttpMethod.GET,
                path=f"weather/api/weather/{dataset}/{{interval}}/{{lat}},{{lon}}",
                properties={
                    "interval": INTERVAL,
                    "lat": {
                        "type": "number",
                        "minimum": -90,
                        "maximum": 90,
                        "description": "Latitude in decimal degrees"
                    },
                    "lon": {
                        "type": "number",
                        "minimum": -180,
                        "maximum": 180,
                        "description": "Longitude in decimal degrees"
                    },
                    **SERIES_FILTERS,
                },
                required=["interval", "lat", "lon"],
            )
