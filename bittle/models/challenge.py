from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Challenge(BaseModel):
    id: str
    family_tree_id: str
    prompt: str
    point_value: Optional[int] = None
    deadline: Optional[datetime] = None
    created_at: datetime
