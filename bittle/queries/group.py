from typing import Any

from bittle.core.graph import GROUP_HEIGHT, GROUP_WIDTH, format_dimension
from bittle.models.base import parse_entities, parse_entity
from bittle.models.group import Group
from bittle.queries.base import fetch_rows, fetch_single, first_inserted, run_query


def create_group(client: Any, family_tree_id: str) -> Group:
    response = run_query(
        client.table("group").insert({
            "family_tree_id": family_tree_id,
            "position_x": 100,
            "position_y": 100,
            "width": format_dimension(GROUP_WIDTH),
            "height": format_dimension(GROUP_HEIGHT),
        }),
        "creating group",
    )
    return parse_entity(Group, first_inserted(response, "creating group"))


def get_groups(client: Any, family_tree_id: str) -> list[Group]:
    rows = fetch_rows(
        client.table("group")
        .select("id, family_tree_id, position_x, position_y, width, height")
        .eq("family_tree_id", family_tree_id),
        "fetching groups",
    )
    return parse_entities(Group, rows)


def get_group(client: Any, group_id: str) -> Group:
    row = fetch_single(
        client.table("group").select("*").eq("id", group_id).single(),
        "fetching group",
    )
    return parse_entity(Group, row)


def update_group_position(client: Any, group_id: str, x: float, y: float) -> None:
    run_query(
        client.table("group").update({"position_x": x, "position_y": y}).eq("id", group_id),
        "moving group",
    )


def resize_group(client: Any, group_id: str, width: float, height: float) -> None:
    run_query(
        client.table("group")
        .update({"width": format_dimension(width), "height": format_dimension(height)})
        .eq("id", group_id),
        "resizing group",
    )


def delete_group(client: Any, group_id: str) -> None:
    run_query(client.table("group").delete().eq("id", group_id), "deleting group")
