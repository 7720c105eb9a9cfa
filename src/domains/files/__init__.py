"""Files Domain - machine file tools.

Machine files are the raw files Leaf ingests from providers or uploads
(shapefiles, ISOXML, Climate/Deere/CNHI exports) before they are merged
into operations.
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


class FilesDomain(RESTDomain):
    """Tools for machine files, served by the Leaf Operations service."""

    name = "files"
    description = "Machine files"

    def _define_tools(self) -> None:
        """Define all machine file tools."""

        self._add_tool(
            name="listFiles",
            description=(
                "Paginated list of machine files with optional filters.\n"
                "Filters: 'leafUserId', 'provider', 'status' (e.g. PROCESSED, "
                "FAILED), 'origin' (provider, automerged, merged, uploaded), "
                "'organizationId', 'batchId', 'operationType', 'minArea' "
                "(square meters) and the ISO-8601 bounds 'createdTime', "
                "'startTime', 'updatedTime', 'endTime'.\n"
                + PAGINATION_DOC + " 'sort' takes 'property,asc|desc'."
            ),
            method=HttpMethod.GET,
            path="operations/api/files",
            properties={
                "leafUserId": uuid_param("Only files of this Leaf user"),
                "provider": string_param("Provider name filter"),
                "status": string_param("Processing status filter"),
                "origin": string_param("File origin filter"),
                "organizationId": string_param("Provider organization ID"),
                "batchId": uuid_param("Upload batch ID"),
                "createdTime": string_param("Files created at or after (ISO-8601)"),
                "startTime": string_param("Files starting at or after (ISO-8601)"),
                "updatedTime": string_param("Files updated at or after (ISO-8601)"),
                "endTime": string_param("Files ending at or before (ISO-8601)"),
                "operationType": string_param("Operation type filter"),
                "minArea": {"type": "number", "description": "Minimum area in square meters"},
                "page": PAGE,
                "size": SIZE,
                "sort": SORT,
            },
        )

        file_id = {"id": string_param("Machine file ID")}

        self._add_tool(
            name="getFile",
            description="Return a machine file by ID.",
            method=HttpMethod.GET,
            path="operations/api/files/{id}",
            properties=file_id,
            required=["id"],
        )

        self._add_tool(
            name="getFileSummary",
            description="Return the GeoJSON summary of a machine file.",
            method=HttpMethod.GET,
            path="operations/api/files/{id}/summary",
            properties=file_id,
            required=["id"],
        )

        self._add_tool(
            name="getFileStatus",
            description="Return the processing status of each step for a machine file.",
            method=HttpMethod.GET,
            path="operations/api/files/{id}/status",
            properties=file_id,
            required=["id"],
        )
