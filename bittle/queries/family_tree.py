from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from bittle.core.codes import normalize_code
from bittle.core.graph import (
    GROUP_HEIGHT,
    GROUP_WIDTH,
    calculate_member_positions,
    default_group_position,
    format_dimension,
)
from bittle.models.base import parse_entities, parse_entity
from bittle.models.family_tree import FamilyTree
from bittle.models.form_submission import FormSubmission
from bittle.models.group import Group
from bittle.models.tree_member import TreeMember
from bittle.queries.base import fetch_rows, fetch_single, first_inserted, run_query
from bittle.queries.response import get_form_submissions
from bittle.queries.tree_member import get_deleted_members
from bittle.schemas.family_tree_schema import FamilyTreeMemberSeed

logger = logging.getLogger(__name__)


# ============================================================
# READS
# ============================================================

def get_family_tree_by_id(client: Any, family_tree_id: str) -> FamilyTree:
    row = fetch_single(
        client.table("family_tree").select("*").eq("id", family_tree_id).single(),
        "fetching family tree",
    )
    return parse_entity(FamilyTree, row)


def get_family_tree_by_code(client: Any, code: str) -> FamilyTree:
    row = fetch_single(
        client.table("family_tree").select("*").eq("code", normalize_code(code)).single(),
        "fetching family tree by code",
    )
    return parse_entity(FamilyTree, row)


def get_family_trees(client: Any, author_id: str) -> list[FamilyTree]:
    rows = fetch_rows(
        client.table("family_tree").select("*").eq("author_id", author_id),
        "fetching family trees",
    )
    return parse_entities(FamilyTree, rows)


def _find_tree(client: Any, column: str, value: str, action: str) -> Optional[FamilyTree]:
    rows = fetch_rows(
        client.table("family_tree").select("*").eq(column, value).limit(1),
        action,
    )
    return parse_entity(FamilyTree, rows[0]) if rows else None


def check_existing_family_tree(client: Any, form_id: str) -> Optional[FamilyTree]:
    return _find_tree(client, "form_id", form_id, "checking existing family tree")


def refetch_submissions(client: Any, family_tree_id: str) -> list[FormSubmission]:
    """Submissions to the tree's form, minus those whose member was deleted."""
    tree = fetch_single(
        client.table("family_tree").select("form_id").eq("id", family_tree_id).single(),
        "fetching family tree",
    )
    submissions = get_form_submissions(client, tree["form_id"])
    deleted = {d.submission_id for d in get_deleted_members(client, family_tree_id)}
    return [s for s in submissions if s.id not in deleted]


# ============================================================
# WRITES
# ============================================================

def update_family_tree(
    client: Any,
    family_tree_id: str,
    title: str,
    description: Optional[str],
) -> None:
    run_query(
        client.table("family_tree")
        .update({"title": title, "description": description})
        .eq("id", family_tree_id),
        "updating family tree",
    )


def delete_family_tree(client: Any, family_tree_id: str) -> None:
    run_query(
        client.table("family_tree").delete().eq("id", family_tree_id),
        "deleting family tree",
    )


def _seed_members_from_responses(
    client: Any, form_id: str, question_id: str
) -> list[FamilyTreeMemberSeed]:
    rows = fetch_rows(
        client.table("question_response")
        .select("free_text, form_submission_id")
        .eq("form_id", form_id)
        .eq("question_id", question_id),
        "fetching question responses",
    )
    seeds = []
    for row in rows:
        identifier = (row.get("free_text") or "").strip()
        if not identifier:
            logger.info("Skipping blank answer from submission %s", row.get("form_submission_id"))
            continue
        seeds.append(FamilyTreeMemberSeed(
            identifier=identifier,
            form_submission_id=row.get("form_submission_id"),
        ))
    return seeds


def create_family_tree(
    client: Any,
    *,
    form_id: str,
    question_id: str,
    title: str,
    code: str,
    author_id: str,
    description: Optional[str] = None,
    members: Sequence[FamilyTreeMemberSeed] = (),
) -> FamilyTree:
    """
    Create the tree for a form, a default group centered in the viewport,
    and its members laid out inside that group.

    Without explicit members, one member is created per answer to the
    tree's question (the answer text becomes the identifier). Big/little
    connections are created from each seed's `littles`, matched by
    identifier. Each step is its own store call; a failure part way leaves
    the earlier rows in place.
    """
    code = normalize_code(code)

    if check_existing_family_tree(client, form_id):
        raise ValueError(f"Family tree already exists for form ID: {form_id}")
    if _find_tree(client, "code", code, "checking family tree code"):
        raise ValueError(f'Family tree with code "{code}" already exists')

    response = run_query(
        client.table("family_tree").insert({
            "form_id": form_id,
            "question_id": question_id,
            "title": title,
            "code": code,
            "description": description,
            "author_id": author_id,
        }),
        "creating family tree",
    )
    tree = parse_entity(FamilyTree, first_inserted(response, "creating family tree"))

    group_x, group_y = default_group_position()
    response = run_query(
        client.table("group").insert({
            "family_tree_id": tree.id,
            "position_x": group_x,
            "position_y": group_y,
            "width": format_dimension(GROUP_WIDTH),
            "height": format_dimension(GROUP_HEIGHT),
        }),
        "creating default group",
    )
    default_group = parse_entity(Group, first_inserted(response, "creating default group"))

    seeds = list(members) or _seed_members_from_responses(client, form_id, question_id)
    if not seeds:
        return tree

    positions = calculate_member_positions(len(seeds), GROUP_WIDTH, GROUP_HEIGHT)
    rows = [
        {
            "family_tree_id": tree.id,
            "identifier": seed.identifier,
            "form_submission_id": seed.form_submission_id,
            "group_id": seed.group_id or default_group.id,
            "is_big": seed.is_big,
            "position_x": x,
            "position_y": y,
        }
        for seed, (x, y) in zip(seeds, positions)
    ]
    response = run_query(client.table("tree_member").insert(rows), "inserting tree members")
    inserted = parse_entities(TreeMember, response.data)

    by_identifier = {m.identifier: m.id for m in inserted}
    connections = []
    for seed, member in zip(seeds, inserted):
        for little in seed.littles:
            little_id = by_identifier.get(little.strip())
            if little_id is None or little_id == member.id:
                logger.info("Skipping connection %s -> %s", seed.identifier, little)
                continue
            connections.append({
                "big_id": member.id,
                "little_id": little_id,
                "family_tree_id": tree.id,
            })

    if connections:
        run_query(client.table("connections").insert(connections), "creating connections")

    return tree
