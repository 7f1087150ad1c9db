from __future__ import annotations

import pytest
from conftest import ORG_ID, FakeSupabase

from bittle.core import assembly
from bittle.core.assembly import assemble_family_tree
from bittle.core.graph import calculate_member_positions
from bittle.errors import FamilyTreeAssemblyError, StoreError
from bittle.models.base import parse_entities
from bittle.models.tree_member import TreeMember
from bittle.queries.family_tree import (
    check_existing_family_tree,
    create_family_tree,
    get_family_trees,
    refetch_submissions,
)
from bittle.schemas.family_tree_schema import FamilyTreeMemberSeed


def _new_tree(store: FakeSupabase, **kwargs):
    params = dict(
        form_id="form-9",
        question_id="q-9",
        title="Spring tree",
        code="spr1",
        author_id=ORG_ID,
    )
    params.update(kwargs)
    return create_family_tree(store, **params)


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def test_assemble_resolves_code_case_insensitively(xq7z_store) -> None:
    aggregate = assemble_family_tree(xq7z_store, "xq7z")

    assert aggregate.tree.id == "tree-1"
    assert [m.identifier for m in aggregate.members] == ["Ada", "Grace"]
    assert [g.id for g in aggregate.groups] == ["group-1"]
    assert [(c.big_id, c.little_id) for c in aggregate.connections] == [("m-big", "m-little")]


def test_assemble_drops_records_of_other_trees(xq7z_store, monkeypatch) -> None:
    xq7z_store.tables["tree_member"].append({
        "id": "m-foreign",
        "family_tree_id": "tree-2",
        "identifier": "Mallory",
        "form_submission_id": None,
    })

    # a members fetch that ignores the tree filter
    def unfiltered_members(client, family_tree_id):
        return parse_entities(TreeMember, client.rows("tree_member"))

    parts = tuple(
        (name, unfiltered_members if name == "members" else fetch)
        for name, fetch in assembly._PARTS
    )
    monkeypatch.setattr(assembly, "_PARTS", parts)

    aggregate = assemble_family_tree(xq7z_store, "XQ7Z")
    assert [m.id for m in aggregate.members] == ["m-big", "m-little"]


def test_assemble_unknown_code_raises_store_error(xq7z_store) -> None:
    with pytest.raises(StoreError) as err:
        assemble_family_tree(xq7z_store, "ZZZZ")
    assert not isinstance(err.value, FamilyTreeAssemblyError)


def test_assemble_failure_carries_partial_result(xq7z_store) -> None:
    xq7z_store.fail("connections", "select", message="timeout")

    with pytest.raises(FamilyTreeAssemblyError) as err:
        assemble_family_tree(xq7z_store, "XQ7Z")

    partial = err.value.partial
    assert partial.tree.code == "XQ7Z"
    assert len(partial.members) == 2
    assert len(partial.groups) == 1
    assert partial.connections == []
    assert "timeout" in err.value.message


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


def test_create_tree_with_explicit_members_and_links() -> None:
    store = FakeSupabase()
    tree = _new_tree(store, members=[
        FamilyTreeMemberSeed(identifier="Ada", is_big=True, littles=["Grace", "Ada", "Nobody"]),
        FamilyTreeMemberSeed(identifier="Grace"),
    ])

    assert tree.code == "SPR1"
    assert check_existing_family_tree(store, "form-9").id == tree.id

    groups = store.rows("group")
    assert len(groups) == 1
    assert groups[0]["width"] == "300px"

    members = store.rows("tree_member")
    assert [m["identifier"] for m in members] == ["Ada", "Grace"]
    assert all(m["group_id"] == groups[0]["id"] for m in members)
    assert [(m["position_x"], m["position_y"]) for m in members] == calculate_member_positions(2)

    # self-link and unknown identifier are skipped
    by_identifier = {m["identifier"]: m["id"] for m in members}
    assert [(c["big_id"], c["little_id"]) for c in store.rows("connections")] == [
        (by_identifier["Ada"], by_identifier["Grace"]),
    ]


def test_create_tree_seeds_members_from_answers() -> None:
    store = FakeSupabase({"question_response": [
        {"id": "r1", "form_id": "form-9", "question_id": "q-9", "free_text": "Ada", "form_submission_id": "s1"},
        {"id": "r2", "form_id": "form-9", "question_id": "q-9", "free_text": "  ", "form_submission_id": "s2"},
        {"id": "r3", "form_id": "form-9", "question_id": "q-other", "free_text": "Bob", "form_submission_id": "s3"},
        {"id": "r4", "form_id": "form-9", "question_id": "q-9", "free_text": " Grace ", "form_submission_id": "s4"},
    ]})

    _new_tree(store)

    members = store.rows("tree_member")
    assert [(m["identifier"], m["form_submission_id"]) for m in members] == [
        ("Ada", "s1"),
        ("Grace", "s4"),
    ]


def test_create_tree_rejects_duplicate_form_or_code(xq7z_store) -> None:
    with pytest.raises(ValueError):
        _new_tree(xq7z_store, form_id="form-1")
    with pytest.raises(ValueError):
        _new_tree(xq7z_store, code="xq7z")
    assert [t.id for t in get_family_trees(xq7z_store, ORG_ID)] == ["tree-1"]


def test_refetch_submissions_skips_deleted_members(xq7z_store) -> None:
    xq7z_store.tables["form_submission"] = [
        {"id": "sub-1", "form_id": "form-1", "created_at": "2025-09-02T00:00:00+00:00"},
        {"id": "sub-2", "form_id": "form-1", "created_at": "2025-09-03T00:00:00+00:00"},
        {"id": "sub-3", "form_id": "form-1", "created_at": "2025-09-04T00:00:00+00:00"},
    ]
    xq7z_store.tables["deleted_member"] = [
        {"id": "d-1", "submission_id": "sub-2", "family_tree_id": "tree-1"},
    ]

    assert [s.id for s in refetch_submissions(xq7z_store, "tree-1")] == ["sub-1", "sub-3"]
