"""Users Domain - Leaf user management tools."""

from shared.models import HttpMethod
from domains.base import PAGE, PAGINATION_DOC, SIZE, RESTDomain, string_param


class UsersDomain(RESTDomain):
    """Tools for the Leaf User Management service."""

    name = "users"
    description = "Leaf users"

    def _define_tools(self) -> None:
        self._add_tool(
            name="listUsers",
            description=(
                "Paginated list of Leaf users, optionally filtered by "
                "'email', 'name' or 'externalId'.\n" + PAGINATION_DOC
            ),
            method=HttpMethod.GET,
            path="usermanagement/api/users",
            properties={
                "email": string_param("Email filter"),
                "name": string_param("Name filter"),
                "externalId": string_param("Your own identifier for the user"),
                "page": PAGE,
                "size": SIZE,
            },
        )
