from typing import Any

from bittle.models.base import parse_entities
from bittle.models.question import Question, QuestionOption
from bittle.queries.base import fetch_rows, run_query

# Default questionnaire every new form starts from
TEMPLATE_QUESTIONS = [
    {"prompt": "What is your name?", "type": "FREE_RESPONSE", "index": 1},
    {"prompt": "What year are you?", "type": "MULTIPLE_CHOICE", "index": 2},
    {
        "prompt": "From these choices, what might you say about your vibe?",
        "type": "SELECT_ALL",
        "index": 3,
    },
]

TEMPLATE_OPTIONS = {
    "MULTIPLE_CHOICE": ["Freshman", "Sophomore", "Junior", "Senior"],
    "SELECT_ALL": [
        "Chill and laid-back",
        "Energetic and outgoing",
        "Creative and artistic",
        "Academic and studious",
    ],
}


def create_template_questions(client: Any, form_id: str) -> list[Question]:
    payload = [dict(q, form_id=form_id) for q in TEMPLATE_QUESTIONS]
    response = run_query(
        client.table("question").insert(payload),
        "creating template questions",
    )
    questions = parse_entities(Question, response.data)

    for question in questions:
        labels = TEMPLATE_OPTIONS.get(question.type)
        if not labels:
            continue
        options = [
            {"question_id": question.id, "label": label, "index": i}
            for i, label in enumerate(labels, start=1)
        ]
        run_query(
            client.table("question_option").insert(options),
            f"creating {question.type} question options",
        )

    return questions


def get_questions(client: Any, form_id: str) -> list[Question]:
    rows = fetch_rows(
        client.table("question").select("*").eq("form_id", form_id).order("index"),
        "fetching questions",
    )
    return parse_entities(Question, rows)


def get_question_options(client: Any, question_ids: list[str]) -> list[QuestionOption]:
    if not question_ids:
        return []
    rows = fetch_rows(
        client.table("question_option")
        .select("*")
        .in_("question_id", question_ids)
        .order("index"),
        "fetching question options",
    )
    return parse_entities(QuestionOption, rows)
