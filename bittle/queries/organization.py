from typing import Any, Optional

from bittle.models.base import parse_entity
from bittle.models.organization import Organization
from bittle.queries.base import fetch_single, run_query


def get_organization(client: Any, organization_id: str) -> Organization:
    row = fetch_single(
        client.table("organization").select("*").eq("id", organization_id).single(),
        "fetching the organization",
    )
    return parse_entity(Organization, row)


# No version check on either update: last write wins.
def change_organization_name(client: Any, name: str, organization_id: str) -> None:
    run_query(
        client.table("organization").update({"name": name}).eq("id", organization_id),
        "changing organization name",
    )


def change_affiliation(client: Any, affiliation: Optional[str], organization_id: str) -> None:
    run_query(
        client.table("organization")
        .update({"affiliation": affiliation})
        .eq("id", organization_id),
        "changing affiliation",
    )
