from typing import Optional

from pydantic import BaseModel


class PointSubmission(BaseModel):
    id: str
    connection_id: str
    prompt: Optional[str] = None
    point: Optional[int] = None
    challenge_id: Optional[str] = None
