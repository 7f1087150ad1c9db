from fastapi import APIRouter, Depends

from bittle.core.cache import CacheKeys
from bittle.core.context import RequestContext, get_context
from bittle.models.organization import Organization
from bittle.queries.organization import (
    change_affiliation,
    change_organization_name,
    get_organization,
)
from bittle.schemas.organization_schema import OrganizationUpdate

router = APIRouter(prefix="/api/organization", tags=["Organization"])


@router.get("", response_model=Organization)
def read_organization(ctx: RequestContext = Depends(get_context)):
    return get_organization(ctx.client, ctx.user_id)


# --------------------------------------------------
# EDIT INFO (only changed fields are written)
# --------------------------------------------------
@router.patch("", response_model=Organization)
def update_organization(
    payload: OrganizationUpdate,
    ctx: RequestContext = Depends(get_context),
):
    current = get_organization(ctx.client, ctx.user_id)

    if "affiliation" in payload.model_fields_set and payload.affiliation != current.affiliation:
        change_affiliation(ctx.client, payload.affiliation, ctx.user_id)

    if payload.name is not None and payload.name != current.name:
        change_organization_name(ctx.client, payload.name, ctx.user_id)

    ctx.cache.invalidate(ctx.user_id, CacheKeys.ORGANIZATION)
    return get_organization(ctx.client, ctx.user_id)
