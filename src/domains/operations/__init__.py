"""Operations Domain - machine operation tools.

Operations are Leaf's merged, standardized view of machine activity
(planting, application, harvest, tillage) across providers.
"""

from shared.models import HttpMethod
from domains.base import (
    PAGE,
    PAGINATION_DOC,
    SIZE,
    SORT,
    RESTDomain,
    string_param,
    uuid_param,
)


class OperationsDomain(RESTDomain):
    """Tools for the Leaf Operations service."""

    name = "operations"
    description = "Machine operations"

    def _define_tools(self) -> None:
        """Define all Operations tools."""

        self._add_tool(
            name="listOperations",
            description=(
                "Paginated list of operations with optional filters.\n"
                "Filters: 'leafUserId', 'provider', 'operationType' "
                "(planted, applied, harvested, tillage), 'fieldId', and the "
                "ISO-8601 time bounds 'startTime', 'endTime', 'updatedTime'.\n"
                + PAGINATION_DOC + " 'sort' takes 'property,asc|desc'."
            ),
            method=HttpMethod.GET,
            path="operations/api/operations",
            properties={
                "leafUserId": uuid_param("Only operations of this Leaf user"),
                "provider": string_param("Provider name filter"),
                "startTime": string_param("Operations starting at or after (ISO-8601)"),
                "updatedTime": string_param("Operations updated at or after (ISO-8601)"),
                "endTime": string_param("Operations ending at or before (ISO-8601)"),
                "operationType": string_param("Operation type filter"),
                "fieldId": uuid_param("Only operations intersecting this field"),
                "page": PAGE,
                "size": SIZE,
                "sort": SORT,
            },
        )

        operation_id = {"id": string_param("Operation ID")}

        self._add_tool(
            name="getOperation",
            description="Get a single operation by ID.",
            method=HttpMethod.GET,
            path="operations/api/operations/{id}",
            properties=operation_id,
            required=["id"],
        )

        self._add_tool(
            name="getOperationSummary",
            description="Get the GeoJSON summary (totals and averages) of an operation.",
            method=HttpMethod.GET,
            path="operations/api/operations/{id}/summary",
            properties=operation_id,
            required=["id"],
        )

        self._add_tool(
            name="getOperationUnits",
            description="Return the unit of measure of every property of an operation.",
            method=HttpMethod.GET,
            path="operations/api/operations/{id}/units",
            properties=operation_id,
            required=["id"],
        )
