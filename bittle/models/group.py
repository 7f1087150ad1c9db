from typing import Optional

from pydantic import BaseModel


class Group(BaseModel):
    id: str
    family_tree_id: str

    position_x: Optional[float] = 100
    position_y: Optional[float] = 100

    # Stored as CSS lengths, e.g. "300px"
    width: Optional[str] = "300px"
    height: Optional[str] = "200px"
