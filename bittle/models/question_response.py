from typing import Optional

from pydantic import BaseModel


class QuestionResponse(BaseModel):
    id: str
    form_id: str
    question_id: str
    free_text: Optional[str]
    form_submission_id: Optional[str] = None


class ResponseOptionSelection(BaseModel):
    response_id: str
    option_id: str
