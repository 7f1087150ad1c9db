from pydantic import BaseModel


class DeletedMember(BaseModel):
    """Audit row written when a submission-backed member is removed from a tree."""

    id: str
    submission_id: str
    family_tree_id: str
