import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from bittle.core.cache import CacheKeys
from bittle.core.codes import normalize_code
from bittle.core.context import RequestContext, get_context
from bittle.core.pairings import SortOption, build_pairings, sort_pairings
from bittle.models.challenge import Challenge
from bittle.models.point_submission import PointSubmission
from bittle.queries.connection import get_connections
from bittle.queries.family_tree import get_family_tree_by_code
from bittle.queries.family_tree_manage import (
    create_challenge,
    create_point_submission,
    create_point_submission_with_challenge,
    delete_challenge,
    delete_point_submission,
    get_challenge_submissions,
    get_challenges,
    get_point_submissions,
    update_challenge,
)
from bittle.queries.tree_member import get_family_tree_members
from bittle.routers.family_tree_router import invalidate_tree
from bittle.schemas.challenge_schema import (
    ChallengeCreate,
    ChallengeSubmit,
    ChallengeUpdate,
    CustomPointCreate,
    ManagePageOut,
)

logger = logging.getLogger(__name__)

pages = APIRouter(prefix="/dashboard/family-tree", tags=["Family Tree Pages"])
router = APIRouter(prefix="/api", tags=["Challenges & Points"])


# ============================================================
# MANAGE PAGE
# ============================================================

@pages.get("/{form_code}/manage", response_model=ManagePageOut)
def manage_family_tree(
    form_code: str,
    sort_by: SortOption = Query("alphabetical"),
    ctx: RequestContext = Depends(get_context),
):
    tree = get_family_tree_by_code(ctx.client, normalize_code(form_code))

    challenges = ctx.cache.get_or_fetch(
        CacheKeys.challenges(ctx.user_id, tree.id),
        lambda: get_challenges(ctx.client, tree.id),
    )
    connections = ctx.cache.get_or_fetch(
        CacheKeys.connections(ctx.user_id, tree.id),
        lambda: get_connections(ctx.client, tree.id),
    )

    identifiers = {}
    if connections:
        identifiers = {m.id: m.identifier for m in get_family_tree_members(ctx.client, tree.id)}

    return ManagePageOut(
        familyTree=tree,
        challenges=challenges,
        pairings=sort_pairings(build_pairings(connections, identifiers), sort_by),
    )


# ============================================================
# CHALLENGES
# ============================================================

@router.post("/family-trees/{family_tree_id}/challenges", response_model=Challenge, status_code=201)
def create_challenge_route(
    family_tree_id: str,
    payload: ChallengeCreate,
    ctx: RequestContext = Depends(get_context),
):
    challenge = create_challenge(
        ctx.client, family_tree_id, payload.prompt, payload.point_value, payload.deadline
    )
    invalidate_tree(ctx)
    return challenge


@router.put("/challenges/{challenge_id}", status_code=204)
def update_challenge_route(
    challenge_id: str,
    payload: ChallengeUpdate,
    ctx: RequestContext = Depends(get_context),
):
    update_challenge(
        ctx.client, challenge_id, payload.prompt, payload.point_value, payload.deadline
    )
    invalidate_tree(ctx)


@router.delete("/challenges/{challenge_id}", status_code=204)
def delete_challenge_route(challenge_id: str, ctx: RequestContext = Depends(get_context)):
    delete_challenge(ctx.client, challenge_id)
    invalidate_tree(ctx)


@router.get("/challenges/{challenge_id}/submissions", response_model=List[PointSubmission])
def challenge_submissions(challenge_id: str, ctx: RequestContext = Depends(get_context)):
    return get_challenge_submissions(ctx.client, challenge_id)


# ============================================================
# POINT SUBMISSIONS
# ============================================================

@router.get("/connections/{connection_id}/submissions", response_model=List[PointSubmission])
def connection_submissions(connection_id: str, ctx: RequestContext = Depends(get_context)):
    return ctx.cache.get_or_fetch(
        CacheKeys.point_submissions(ctx.user_id, connection_id),
        lambda: get_point_submissions(ctx.client, connection_id),
    )


@router.post("/connections/{connection_id}/points", response_model=PointSubmission, status_code=201)
def award_custom_points(
    connection_id: str,
    payload: CustomPointCreate,
    ctx: RequestContext = Depends(get_context),
):
    submission = create_point_submission(
        ctx.client,
        connection_id,
        payload.prompt or "Custom point award",
        payload.point,
    )
    invalidate_tree(ctx)
    return submission


@router.post(
    "/connections/{connection_id}/challenge-submissions",
    response_model=PointSubmission,
    status_code=201,
)
def submit_challenge(
    connection_id: str,
    payload: ChallengeSubmit,
    ctx: RequestContext = Depends(get_context),
):
    submission = create_point_submission_with_challenge(
        ctx.client, connection_id, payload.challenge_id
    )
    invalidate_tree(ctx)
    return submission


@router.delete("/point-submissions/{submission_id}", status_code=204)
def delete_point_submission_route(submission_id: str, ctx: RequestContext = Depends(get_context)):
    delete_point_submission(ctx.client, submission_id)
    invalidate_tree(ctx)
