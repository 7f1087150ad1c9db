from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Form(BaseModel):
    id: str
    author: str
    created_at: datetime
    # nullable, but the column is always selected
    deadline: Optional[datetime]
    code: str

    title: Optional[str] = None
    description: Optional[str] = None
