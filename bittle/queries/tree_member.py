from typing import Any, Optional

from bittle.models.base import parse_entities, parse_entity
from bittle.models.deleted_member import DeletedMember
from bittle.models.tree_member import TreeMember
from bittle.queries.base import fetch_rows, fetch_single, run_query


def get_family_tree_members(client: Any, family_tree_id: str) -> list[TreeMember]:
    rows = fetch_rows(
        client.table("tree_member").select("*").eq("family_tree_id", family_tree_id),
        "fetching members",
    )
    return parse_entities(TreeMember, rows)


def get_tree_member(client: Any, member_id: str) -> TreeMember:
    row = fetch_single(
        client.table("tree_member").select("*").eq("id", member_id).single(),
        "fetching member",
    )
    return parse_entity(TreeMember, row)


def get_identifier(client: Any, member_id: str) -> str:
    row = fetch_single(
        client.table("tree_member").select("identifier").eq("id", member_id).single(),
        "fetching identifier",
    )
    return row["identifier"]


def rename_identifier(client: Any, member_id: str, identifier: str) -> None:
    identifier = identifier.strip()
    if not identifier:
        raise ValueError("identifier must not be blank")
    run_query(
        client.table("tree_member").update({"identifier": identifier}).eq("id", member_id),
        "renaming member",
    )


def toggle_big(client: Any, member_id: str, is_big: bool) -> None:
    run_query(
        client.table("tree_member").update({"is_big": is_big}).eq("id", member_id),
        "toggling big status",
    )


def update_member_position(
    client: Any,
    member_id: str,
    x: float,
    y: float,
    group_id: Optional[str],
) -> None:
    """Position is relative to `group_id` when set; None detaches the member."""
    run_query(
        client.table("tree_member")
        .update({"group_id": group_id, "position_x": x, "position_y": y})
        .eq("id", member_id),
        "updating member position",
    )


def delete_member(client: Any, member: TreeMember) -> None:
    """
    Remove a member. Members that came from a form submission leave a
    deleted_member row behind so the submission is not re-imported.
    The two writes are independent; no transaction spans them.
    """
    run_query(
        client.table("tree_member").delete().eq("id", member.id),
        "deleting member",
    )
    if member.form_submission_id:
        run_query(
            client.table("deleted_member").insert({
                "submission_id": member.form_submission_id,
                "family_tree_id": member.family_tree_id,
            }),
            "recording deleted member",
        )


def get_deleted_members(client: Any, family_tree_id: str) -> list[DeletedMember]:
    rows = fetch_rows(
        client.table("deleted_member").select("*").eq("family_tree_id", family_tree_id),
        "fetching deleted members",
    )
    return parse_entities(DeletedMember, rows)
