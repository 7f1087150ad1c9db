from typing import Optional

from pydantic import BaseModel


class Organization(BaseModel):
    id: str
    name: str
    affiliation: Optional[str]
