import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from bittle.core.assembly import assemble_family_tree
from bittle.core.cache import CacheKeys
from bittle.core.codes import normalize_code
from bittle.core.context import RequestContext, get_context
from bittle.core.graph import build_graph
from bittle.models.family_tree import FamilyTree
from bittle.models.form_submission import FormSubmission
from bittle.queries.family_tree import (
    create_family_tree,
    delete_family_tree,
    get_family_tree_by_id,
    get_family_trees,
    refetch_submissions,
    update_family_tree,
)
from bittle.schemas.family_tree_schema import FamilyTreeCreate, FamilyTreeUpdate
from bittle.schemas.graph_schema import GraphPayload

logger = logging.getLogger(__name__)

pages = APIRouter(prefix="/dashboard/family-tree", tags=["Family Tree Pages"])
router = APIRouter(prefix="/api/family-trees", tags=["Family Tree"])


# ============================================================
# HELPERS
# ============================================================

def require_tree_author(ctx: RequestContext, family_tree_id: str) -> FamilyTree:
    """
    Row-level security already hides other tenants' trees; this turns a
    visible-but-foreign tree into a 403 instead of a silent no-op update.
    """
    tree = get_family_tree_by_id(ctx.client, family_tree_id)
    if tree.author_id != ctx.user_id:
        raise HTTPException(403, "You do not have access to this tree")
    return tree


def invalidate_tree(ctx: RequestContext) -> None:
    """Drop every cached view of the caller's trees: graph, list, manage page."""
    ctx.cache.invalidate_scopes(ctx.user_id, CacheKeys.TREE_SCOPES)


# ============================================================
# PAGES
# ============================================================

@pages.get("", response_model=List[FamilyTree])
def list_family_trees(ctx: RequestContext = Depends(get_context)):
    return ctx.cache.get_or_fetch(
        CacheKeys.family_trees(ctx.user_id, ctx.user_id),
        lambda: get_family_trees(ctx.client, ctx.user_id),
    )


@pages.get("/{form_code}/graph", response_model=GraphPayload)
def family_tree_graph(form_code: str, ctx: RequestContext = Depends(get_context)):
    code = normalize_code(form_code)
    aggregate = ctx.cache.get_or_fetch(
        CacheKeys.family_tree(ctx.user_id, code),
        lambda: assemble_family_tree(ctx.client, code),
    )
    return build_graph(aggregate)


# ============================================================
# ACTIONS
# ============================================================

@router.post("", response_model=FamilyTree, status_code=201)
def create_family_tree_route(
    payload: FamilyTreeCreate,
    ctx: RequestContext = Depends(get_context),
):
    try:
        tree = create_family_tree(
            ctx.client,
            form_id=payload.form_id,
            question_id=payload.question_id,
            title=payload.title,
            code=payload.code,
            description=payload.description,
            author_id=ctx.user_id,
            members=payload.members,
        )
    except ValueError as exc:
        raise HTTPException(409, str(exc))

    invalidate_tree(ctx)
    logger.info("Family tree %s created for form %s", tree.code, tree.form_id)
    return tree


@router.patch("/{family_tree_id}", status_code=204)
def update_family_tree_route(
    family_tree_id: str,
    payload: FamilyTreeUpdate,
    ctx: RequestContext = Depends(get_context),
):
    require_tree_author(ctx, family_tree_id)
    update_family_tree(ctx.client, family_tree_id, payload.title, payload.description)
    invalidate_tree(ctx)


@router.delete("/{family_tree_id}", status_code=204)
def delete_family_tree_route(family_tree_id: str, ctx: RequestContext = Depends(get_context)):
    require_tree_author(ctx, family_tree_id)
    delete_family_tree(ctx.client, family_tree_id)
    invalidate_tree(ctx)


@router.get("/{family_tree_id}/submissions", response_model=List[FormSubmission])
def family_tree_submissions(family_tree_id: str, ctx: RequestContext = Depends(get_context)):
    return refetch_submissions(ctx.client, family_tree_id)
