from collections import defaultdict

from fastapi import APIRouter, Depends

from bittle.core.codes import normalize_code
from bittle.core.context import RequestContext, get_public_context
from bittle.queries.form import get_form_by_code
from bittle.queries.question import get_question_options, get_questions
from bittle.schemas.response_schema import QuestionnaireOut, QuestionOut
from bittle.utils.dates import is_past

router = APIRouter(prefix="/input-code", tags=["Questionnaire"])


# --------------------------------------------------
# PUBLIC QUESTIONNAIRE (applicants enter a code)
# --------------------------------------------------
@router.get("/{code}", response_model=QuestionnaireOut)
def questionnaire(code: str, ctx: RequestContext = Depends(get_public_context)):
    form = get_form_by_code(ctx.client, normalize_code(code))
    questions = get_questions(ctx.client, form.id)

    options_by_question = defaultdict(list)
    for option in get_question_options(ctx.client, [q.id for q in questions]):
        options_by_question[option.question_id].append(option)

    return QuestionnaireOut(
        form_id=form.id,
        code=form.code,
        title=form.title,
        description=form.description,
        deadline=form.deadline,
        is_closed=is_past(form.deadline),
        questions=[
            QuestionOut(question=q, options=options_by_question[q.id]) for q in questions
        ],
    )
