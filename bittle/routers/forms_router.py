import logging

from fastapi import APIRouter, Depends, HTTPException

from bittle.core.cache import CacheKeys
from bittle.core.codes import normalize_code
from bittle.core.context import RequestContext, get_context
from bittle.models.form import Form
from bittle.queries.form import create_form, delete_form, get_form_id_by_code
from bittle.queries.question import create_template_questions
from bittle.schemas.form_schema import FormCreate, FormIdOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/forms", tags=["Forms"])


# --------------------------------------------------
# CREATE FORM
# --------------------------------------------------
@router.post("", response_model=Form, status_code=201)
def create_form_route(
    payload: FormCreate,
    ctx: RequestContext = Depends(get_context),
):
    try:
        form = create_form(
            ctx.client,
            ctx.user_id,
            title=payload.title,
            code=payload.code,
            description=payload.description,
            deadline=payload.deadline,
        )
    except ValueError as exc:
        raise HTTPException(409, str(exc))

    if payload.with_template_questions:
        create_template_questions(ctx.client, form.id)

    ctx.cache.invalidate(ctx.user_id, CacheKeys.FORMS)
    logger.info("Form %s created by %s", form.code, ctx.user_id)
    return form


# --------------------------------------------------
# CODE GATE (checked before navigating to a form)
# --------------------------------------------------
@router.get("/code/{code}", response_model=FormIdOut)
def lookup_form_code(code: str, ctx: RequestContext = Depends(get_context)):
    code = normalize_code(code)
    return FormIdOut(id=get_form_id_by_code(ctx.client, code), code=code)


# --------------------------------------------------
# DELETE FORM
# --------------------------------------------------
@router.delete("/{form_id}", status_code=204)
def delete_form_route(form_id: str, ctx: RequestContext = Depends(get_context)):
    delete_form(ctx.client, form_id)
    ctx.cache.invalidate(ctx.user_id, CacheKeys.FORMS)
