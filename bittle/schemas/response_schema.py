from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from bittle.models.question import Question, QuestionOption
from bittle.models.question_response import QuestionResponse, ResponseOptionSelection


# --------------------------------------------------
# APPLICANTS PAGE
# --------------------------------------------------
class ApplicantOut(BaseModel):
    submission_id: str
    created_at: datetime
    responses: List[QuestionResponse]
    selections: List[ResponseOptionSelection]


class ApplicantsPageOut(BaseModel):
    form_id: str
    code: str
    title: Optional[str] = None
    applicants: List[ApplicantOut]


# --------------------------------------------------
# QUESTIONNAIRE (public, by code)
# --------------------------------------------------
class QuestionOut(BaseModel):
    question: Question
    options: List[QuestionOption] = []


class QuestionnaireOut(BaseModel):
    form_id: str
    code: str
    title: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    is_closed: bool
    questions: List[QuestionOut]
