from fastapi import APIRouter, Depends

from bittle.core.cache import CacheKeys
from bittle.core.context import RequestContext, get_context
from bittle.queries.form import get_form_by_code
from bittle.queries.response import (
    get_form_submissions,
    get_question_responses,
    get_response_option_selections,
)
from bittle.schemas.response_schema import ApplicantOut, ApplicantsPageOut

router = APIRouter(prefix="/dashboard", tags=["Applicants"])


def _applicants_page(ctx: RequestContext, form_code: str) -> ApplicantsPageOut:
    form = get_form_by_code(ctx.client, form_code)
    submissions = ctx.cache.get_or_fetch(
        CacheKeys.submissions(ctx.user_id, form.id),
        lambda: get_form_submissions(ctx.client, form.id),
    )

    applicants = [
        ApplicantOut(
            submission_id=s.id,
            created_at=s.created_at,
            responses=get_question_responses(ctx.client, s.id),
            selections=get_response_option_selections(ctx.client, s.id),
        )
        for s in sorted(submissions, key=lambda s: s.created_at)
    ]
    return ApplicantsPageOut(
        form_id=form.id, code=form.code, title=form.title, applicants=applicants
    )


@router.get("/current/applicants/{form_code}", response_model=ApplicantsPageOut)
def current_applicants(form_code: str, ctx: RequestContext = Depends(get_context)):
    return _applicants_page(ctx, form_code)


@router.get("/past/applicants/{form_code}", response_model=ApplicantsPageOut)
def past_applicants(form_code: str, ctx: RequestContext = Depends(get_context)):
    return _applicants_page(ctx, form_code)
