"""Fields Domain - field and boundary management tools.

Wraps the Leaf Fields service:
- Field creation and lookup
- Paginated field listing with filters
- Active boundary retrieval and replacement
"""

from shared.models import HttpMethod
from domains.base import (
    BODY,
    PAGE,
    PAGINATION_DOC,
    SIZE,
    RESTDomain,
    string_param,
    uuid_param,
)


class FieldsDomain(RESTDomain):
    """Tools for the Leaf Fields service."""

    name = "fields"
    description = "Field and field-boundary management"

    def _define_tools(self) -> None:
        """Define all Fields tools."""

        self._add_tool(
            name="createField",
            description=(
                "Create a field for a Leaf user. The body is a Leaf field "
                "object, typically {\"name\": ..., \"geometry\": <GeoJSON "
                "MultiPolygon>}; it is sent unchanged."
            ),
            method=HttpMethod.POST,
            path="fields/api/users/{leafUserId}/fields",
            properties={
                "leafUserId": string_param("Leaf user that will own the field"),
                "body": BODY,
            },
            required=["leafUserId"],
            body_field="body",
        )

        self._add_tool(
            name="getField",
            description="Fetch a single field by ID.",
            method=HttpMethod.GET,
            path="fields/api/users/{leafUserId}/fields/{fieldId}",
            properties={
                "leafUserId": string_param("Leaf user owning the field"),
                "fieldId": string_param("Field ID"),
            },
            required=["leafUserId", "fieldId"],
        )

        self._add_tool(
            name="listFields",
            description=(
                "Paginated list of fields with optional filters.\n"
                "Filters: 'type' (e.g. ORIGINAL, MERGED), 'farmId', "
                "'provider' (e.g. JohnDeere, ClimateFieldView, CNHI), "
                "'leafUserId'.\n" + PAGINATION_DOC
            ),
            method=HttpMethod.GET,
            path="fields/api/fields",
            properties={
                "type": string_param("Field type filter"),
                "farmId": {"type": "integer", "description": "Farm ID filter"},
                "provider": string_param("Provider name filter"),
                "leafUserId": uuid_param("Only fields of this Leaf user"),
                "page": PAGE,
                "size": SIZE,
            },
        )

        self._add_tool(
            name="getFieldBoundary",
            description="Return the active boundary of a field as GeoJSON.",
            method=HttpMethod.GET,
            path="fields/api/users/{leafUserId}/fields/{fieldId}/boundary",
            properties={
                "leafUserId": string_param("Leaf user owning the field"),
                "fieldId": string_param("Field ID"),
            },
            required=["leafUserId", "fieldId"],
        )

        self._add_tool(
            name="updateFieldBoundary",
            description=(
                "Replace the active boundary of a field. The body is "
                "{\"geometry\": <GeoJSON MultiPolygon>}."
            ),
            method=HttpMethod.PUT,
            path="fields/api/users/{leafUserId}/fields/{fieldId}/boundary",
            properties={
                "leafUserId": string_param("Leaf user owning the field"),
                "fieldId": string_param("Field ID"),
                "body": BODY,
            },
            required=["leafUserId", "fieldId"],
            body_field="body",
        )
