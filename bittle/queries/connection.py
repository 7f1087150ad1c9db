from typing import Any

from bittle.models.base import parse_entities, parse_entity
from bittle.models.connection import Connection
from bittle.queries.base import fetch_rows, fetch_single, first_inserted, run_query


def get_connections(client: Any, family_tree_id: str) -> list[Connection]:
    rows = fetch_rows(
        client.table("connections").select("*").eq("family_tree_id", family_tree_id),
        "fetching connections",
    )
    return parse_entities(Connection, rows)


def get_connection(client: Any, connection_id: str) -> Connection:
    row = fetch_single(
        client.table("connections").select("*").eq("id", connection_id).single(),
        "fetching connection",
    )
    return parse_entity(Connection, row)


def create_connection(client: Any, big_id: str, little_id: str) -> Connection:
    """Link a big to a little; the tree is taken from the big's row."""
    if big_id == little_id:
        raise ValueError("A member cannot be their own big")

    member = fetch_single(
        client.table("tree_member").select("family_tree_id").eq("id", big_id).single(),
        "fetching member",
    )
    response = run_query(
        client.table("connections").insert({
            "big_id": big_id,
            "little_id": little_id,
            "family_tree_id": member["family_tree_id"],
        }),
        "creating connection",
    )
    return parse_entity(Connection, first_inserted(response, "creating connection"))


def remove_connection(client: Any, little_id: str) -> None:
    # A little has at most one big, so the little identifies the edge
    run_query(
        client.table("connections").delete().eq("little_id", little_id),
        "removing connection",
    )
