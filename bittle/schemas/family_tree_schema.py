from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from bittle.models.connection import Connection
from bittle.models.family_tree import FamilyTree
from bittle.models.group import Group
from bittle.models.tree_member import TreeMember


def _strip_identifier(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("identifier must not be blank")
    return value


# --------------------------------------------------
# CREATE TREE
# --------------------------------------------------
class FamilyTreeMemberSeed(BaseModel):
    identifier: str
    is_big: bool = False
    # identifiers of this member's littles, resolved after insert
    littles: List[str] = []
    group_id: Optional[str] = None
    form_submission_id: Optional[str] = None

    check_identifier = field_validator("identifier")(_strip_identifier)


class FamilyTreeCreate(BaseModel):
    form_id: str
    question_id: str
    title: str
    code: str
    description: Optional[str] = None
    members: List[FamilyTreeMemberSeed] = []


# --------------------------------------------------
# UPDATE TREE
# --------------------------------------------------
class FamilyTreeUpdate(BaseModel):
    title: str
    description: Optional[str] = None


# --------------------------------------------------
# MEMBERS
# --------------------------------------------------
class IdentifierRename(BaseModel):
    identifier: str

    check_identifier = field_validator("identifier")(_strip_identifier)


class BigToggle(BaseModel):
    is_big: bool


class MemberDrop(BaseModel):
    """Absolute canvas position where a member node was released."""

    x: float
    y: float
    container_height: Optional[float] = None


# --------------------------------------------------
# GROUPS
# --------------------------------------------------
class GroupMove(BaseModel):
    x: float
    y: float


class GroupResize(BaseModel):
    width: float = Field(gt=0)
    height: float = Field(gt=0)


# --------------------------------------------------
# CONNECTIONS
# --------------------------------------------------
class ConnectionCreate(BaseModel):
    big_id: str
    little_id: str


# --------------------------------------------------
# ASSEMBLED TREE (read-only)
# --------------------------------------------------
class FamilyTreeAggregate(BaseModel):
    tree: FamilyTree
    members: List[TreeMember] = []
    groups: List[Group] = []
    connections: List[Connection] = []
