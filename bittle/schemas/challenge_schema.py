from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from bittle.core.pairings import Pairing
from bittle.models.challenge import Challenge
from bittle.models.family_tree import FamilyTree


# --------------------------------------------------
# CHALLENGES
# --------------------------------------------------
class ChallengeCreate(BaseModel):
    prompt: str
    point_value: Optional[int] = None
    deadline: Optional[datetime] = None


class ChallengeUpdate(ChallengeCreate):
    pass


# --------------------------------------------------
# POINT SUBMISSIONS
# --------------------------------------------------
class CustomPointCreate(BaseModel):
    prompt: Optional[str] = None
    point: int


class ChallengeSubmit(BaseModel):
    challenge_id: str


# --------------------------------------------------
# MANAGE PAGE
# --------------------------------------------------
class ManagePageOut(BaseModel):
    familyTree: FamilyTree
    challenges: List[Challenge]
    pairings: List[Pairing]
