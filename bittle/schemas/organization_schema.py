from typing import Optional

from pydantic import BaseModel


# --------------------------------------------------
# EDIT INFO (name and/or affiliation)
# --------------------------------------------------
class OrganizationUpdate(BaseModel):
    name: Optional[str] = None
    affiliation: Optional[str] = None
