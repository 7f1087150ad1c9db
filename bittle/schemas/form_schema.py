from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from bittle.models.form import Form
from bittle.models.organization import Organization


# --------------------------------------------------
# CREATE
# --------------------------------------------------
class FormCreate(BaseModel):
    title: str
    # generated when omitted
    code: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    with_template_questions: bool = True


# --------------------------------------------------
# CODE GATE
# --------------------------------------------------
class FormIdOut(BaseModel):
    id: str
    code: str


# --------------------------------------------------
# DASHBOARD
# --------------------------------------------------
class DashboardOut(BaseModel):
    organization: Organization
    forms: List[Form]
