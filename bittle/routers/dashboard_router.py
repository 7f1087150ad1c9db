from fastapi import APIRouter, Depends

from bittle.core.cache import CacheKeys
from bittle.core.context import RequestContext, get_context
from bittle.queries.form import get_forms
from bittle.queries.organization import get_organization
from bittle.schemas.form_schema import DashboardOut
from bittle.utils.dates import is_past

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def _load_dashboard(ctx: RequestContext) -> DashboardOut:
    # The signed-in user's id is also their organization id
    organization = ctx.cache.get_or_fetch(
        CacheKeys.organization(ctx.user_id, ctx.user_id),
        lambda: get_organization(ctx.client, ctx.user_id),
    )
    forms = ctx.cache.get_or_fetch(
        CacheKeys.forms(ctx.user_id, ctx.user_id),
        lambda: get_forms(ctx.client, ctx.user_id),
    )
    return DashboardOut(organization=organization, forms=forms)


# --------------------------------------------------
# CURRENT FORMS (open, or no deadline)
# --------------------------------------------------
@router.get("/current", response_model=DashboardOut)
def current_forms(ctx: RequestContext = Depends(get_context)):
    page = _load_dashboard(ctx)
    page.forms = [f for f in page.forms if not is_past(f.deadline)]
    return page


# --------------------------------------------------
# PAST FORMS (deadline passed)
# --------------------------------------------------
@router.get("/past", response_model=DashboardOut)
def past_forms(ctx: RequestContext = Depends(get_context)):
    page = _load_dashboard(ctx)
    page.forms = [f for f in page.forms if is_past(f.deadline)]
    return page
