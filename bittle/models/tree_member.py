from typing import Optional

from pydantic import BaseModel, field_validator


class TreeMember(BaseModel):
    id: str
    family_tree_id: str
    identifier: str
    form_submission_id: Optional[str]

    is_big: Optional[bool] = None
    group_id: Optional[str] = None
    big: Optional[str] = None

    # Relative to the parent group when group_id is set
    position_x: Optional[float] = 100
    position_y: Optional[float] = 100

    @field_validator("identifier")
    @classmethod
    def identifier_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("identifier must not be blank")
        return value
