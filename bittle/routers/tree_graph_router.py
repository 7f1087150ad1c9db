"""
Graph interactions: member edits, drag/drop, groups and big/little edges.

Every mutation first loads the member or group it touches and checks that
the caller authored its tree, the same rule the tree update/delete routes
apply, so a visible-but-foreign row answers 403 instead of being edited.

Every endpoint is one independent store operation. Nothing groups them,
so a client that issues several (rename, then move) can be left half
applied if a later call fails; the next page load shows the stored state.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from bittle.core.context import RequestContext, get_context
from bittle.core.dialogs import DeleteMemberDialog, DialogStatus, EditIdentifierDialog
from bittle.core.graph import place_dropped_member
from bittle.models.connection import Connection
from bittle.models.group import Group
from bittle.models.tree_member import TreeMember
from bittle.queries.connection import create_connection, remove_connection
from bittle.queries.group import (
    create_group,
    delete_group,
    get_group,
    get_groups,
    resize_group,
    update_group_position,
)
from bittle.queries.tree_member import (
    delete_member,
    get_tree_member,
    rename_identifier,
    toggle_big,
    update_member_position,
)
from bittle.routers.family_tree_router import invalidate_tree, require_tree_author
from bittle.schemas.family_tree_schema import (
    BigToggle,
    ConnectionCreate,
    GroupMove,
    GroupResize,
    IdentifierRename,
    MemberDrop,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Family Tree Graph"])


def _raise_if_failed(dialog) -> None:
    if dialog.status is DialogStatus.FAILED:
        raise HTTPException(502, dialog.state.reason)


def _owned_member(ctx: RequestContext, member_id: str) -> TreeMember:
    member = get_tree_member(ctx.client, member_id)
    require_tree_author(ctx, member.family_tree_id)
    return member


def _owned_group(ctx: RequestContext, group_id: str) -> Group:
    group = get_group(ctx.client, group_id)
    require_tree_author(ctx, group.family_tree_id)
    return group


# ============================================================
# MEMBERS
# ============================================================

@router.delete("/members/{member_id}", status_code=204)
def delete_member_route(member_id: str, ctx: RequestContext = Depends(get_context)):
    member = _owned_member(ctx, member_id)

    dialog = DeleteMemberDialog(member.identifier)
    dialog.open()
    dialog.confirm(lambda: delete_member(ctx.client, member))
    _raise_if_failed(dialog)

    invalidate_tree(ctx)
    logger.info("Member %s deleted from tree %s", member.id, member.family_tree_id)


@router.put("/members/{member_id}/identifier", status_code=204)
def rename_member_route(
    member_id: str,
    payload: IdentifierRename,
    ctx: RequestContext = Depends(get_context),
):
    member = _owned_member(ctx, member_id)

    dialog = EditIdentifierDialog(member.id, member.identifier)
    dialog.open()
    dialog.set_value(payload.identifier)
    dialog.confirm(lambda node_id, identifier: rename_identifier(ctx.client, node_id, identifier))
    _raise_if_failed(dialog)

    invalidate_tree(ctx)


@router.put("/members/{member_id}/big", status_code=204)
def toggle_big_route(
    member_id: str,
    payload: BigToggle,
    ctx: RequestContext = Depends(get_context),
):
    _owned_member(ctx, member_id)
    toggle_big(ctx.client, member_id, payload.is_big)
    invalidate_tree(ctx)


@router.put("/members/{member_id}/position")
def drop_member_route(
    member_id: str,
    payload: MemberDrop,
    ctx: RequestContext = Depends(get_context),
):
    """Persist where a dragged member landed: into a group, out of one, or loose."""
    member = _owned_member(ctx, member_id)
    groups = get_groups(ctx.client, member.family_tree_id)

    placement = place_dropped_member(
        payload.x, payload.y, groups, container_height=payload.container_height
    )
    update_member_position(
        ctx.client, member.id, placement.x, placement.y, placement.group_id
    )
    invalidate_tree(ctx)
    return {"group_id": placement.group_id, "x": placement.x, "y": placement.y}


@router.post("/members/{member_id}/detach")
def detach_member_route(
    member_id: str,
    payload: MemberDrop,
    ctx: RequestContext = Depends(get_context),
):
    """Take a member out of its group and leave it at the given position."""
    member = _owned_member(ctx, member_id)
    if not member.group_id:
        raise HTTPException(400, "Member is not in a group")

    update_member_position(ctx.client, member.id, payload.x, payload.y, None)
    invalidate_tree(ctx)
    return {"group_id": None, "x": payload.x, "y": payload.y}


# ============================================================
# GROUPS
# ============================================================

@router.post("/family-trees/{family_tree_id}/groups", response_model=Group, status_code=201)
def create_group_route(family_tree_id: str, ctx: RequestContext = Depends(get_context)):
    require_tree_author(ctx, family_tree_id)
    group = create_group(ctx.client, family_tree_id)
    invalidate_tree(ctx)
    return group


@router.put("/groups/{group_id}/position", status_code=204)
def move_group_route(
    group_id: str,
    payload: GroupMove,
    ctx: RequestContext = Depends(get_context),
):
    _owned_group(ctx, group_id)
    update_group_position(ctx.client, group_id, payload.x, payload.y)
    invalidate_tree(ctx)


@router.put("/groups/{group_id}/size", status_code=204)
def resize_group_route(
    group_id: str,
    payload: GroupResize,
    ctx: RequestContext = Depends(get_context),
):
    _owned_group(ctx, group_id)
    resize_group(ctx.client, group_id, payload.width, payload.height)
    invalidate_tree(ctx)


@router.delete("/groups/{group_id}", status_code=204)
def delete_group_route(group_id: str, ctx: RequestContext = Depends(get_context)):
    _owned_group(ctx, group_id)
    delete_group(ctx.client, group_id)
    invalidate_tree(ctx)


# ============================================================
# CONNECTIONS
# ============================================================

@router.post("/connections", response_model=Connection, status_code=201)
def create_connection_route(
    payload: ConnectionCreate,
    ctx: RequestContext = Depends(get_context),
):
    _owned_member(ctx, payload.big_id)
    try:
        connection = create_connection(ctx.client, payload.big_id, payload.little_id)
    except ValueError as exc:
        raise HTTPException(400, str(exc))

    invalidate_tree(ctx)
    return connection


@router.delete("/connections/little/{little_id}", status_code=204)
def remove_connection_route(little_id: str, ctx: RequestContext = Depends(get_context)):
    _owned_member(ctx, little_id)
    remove_connection(ctx.client, little_id)
    invalidate_tree(ctx)
