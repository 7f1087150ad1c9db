from typing import Any

from bittle.models.base import parse_entities
from bittle.models.form_submission import FormSubmission
from bittle.models.question_response import QuestionResponse, ResponseOptionSelection
from bittle.queries.base import fetch_rows


def get_form_submissions(client: Any, form_id: str) -> list[FormSubmission]:
    rows = fetch_rows(
        client.table("form_submission").select("*").eq("form_id", form_id),
        "fetching submission data",
    )
    return parse_entities(FormSubmission, rows)


def get_question_responses(client: Any, form_submission_id: str) -> list[QuestionResponse]:
    rows = fetch_rows(
        client.table("question_response")
        .select("*")
        .eq("form_submission_id", form_submission_id),
        "fetching question responses",
    )
    return parse_entities(QuestionResponse, rows)


def get_response_option_selections(
    client: Any, form_submission_id: str
) -> list[ResponseOptionSelection]:
    rows = fetch_rows(
        client.table("response_option_selection")
        .select("*")
        .eq("form_submission_id", form_submission_id),
        "fetching question option responses",
    )
    return parse_entities(ResponseOptionSelection, rows)
