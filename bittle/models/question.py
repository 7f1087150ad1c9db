from typing import Literal, Optional

from pydantic import BaseModel

QuestionType = Literal["FREE_RESPONSE", "MULTIPLE_CHOICE", "SELECT_ALL"]


class Question(BaseModel):
    id: str
    prompt: str
    form_id: str
    type: QuestionType
    index: Optional[int] = None


class QuestionOption(BaseModel):
    id: str
    question_id: str
    label: str
    index: Optional[int] = None
