from typing import Optional

from pydantic import BaseModel


class Connection(BaseModel):
    id: str
    family_tree_id: str
    big_id: str
    little_id: str
    points: Optional[int] = None
