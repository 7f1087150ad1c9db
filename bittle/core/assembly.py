from __future__ import annotations

import logging
from typing import Any, Sequence, TypeVar

from bittle.errors import EntityValidationError, FamilyTreeAssemblyError, StoreError
from bittle.queries.connection import get_connections
from bittle.queries.family_tree import get_family_tree_by_code
from bittle.queries.group import get_groups
from bittle.queries.tree_member import get_family_tree_members
from bittle.schemas.family_tree_schema import FamilyTreeAggregate

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (aggregate attribute, fetcher) in fetch order
_PARTS = (
    ("members", get_family_tree_members),
    ("groups", get_groups),
    ("connections", get_connections),
)


def _same_tree(records: Sequence[T], family_tree_id: str, part: str) -> list[T]:
    kept = [r for r in records if r.family_tree_id == family_tree_id]
    if len(kept) != len(records):
        logger.warning(
            "Dropped %d %s not belonging to family tree %s",
            len(records) - len(kept), part, family_tree_id,
        )
    return kept


def assemble_family_tree(client: Any, code: str) -> FamilyTreeAggregate:
    """
    Resolve a form code into its tree with members, groups and connections.

    Only records carrying the resolved tree's id are kept. If a fetch
    fails after the tree itself was found, FamilyTreeAssemblyError carries
    what was gathered so far.
    """
    tree = get_family_tree_by_code(client, code)
    aggregate = FamilyTreeAggregate(tree=tree)

    for part, fetch in _PARTS:
        try:
            records = fetch(client, tree.id)
        except (StoreError, EntityValidationError) as exc:
            raise FamilyTreeAssemblyError(
                f"Error assembling family tree {tree.code}: {exc}",
                partial=aggregate,
                code=getattr(exc, "code", None),
            ) from exc
        setattr(aggregate, part, _same_tree(records, tree.id, part))

    return aggregate
