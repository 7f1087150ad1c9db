from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class FormSubmission(BaseModel):
    id: str
    form_id: str
    question_id: Optional[str] = None
    created_at: datetime
