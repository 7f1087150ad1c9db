from typing import Optional

from pydantic import BaseModel


class FamilyTree(BaseModel):
    id: str
    question_id: str
    title: str
    description: Optional[str] = None
    form_id: str
    code: str
    author_id: str
