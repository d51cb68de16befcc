from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from fixapp.models.issue import IssueCategory, IssueStatus


class StatusUpdateIn(BaseModel):
    status: IssueStatus
    message: Optional[str] = Field(default=None, max_length=1000)


class StatusUpdateOut(BaseModel):
    id: int
    status: IssueStatus
    message: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class IssueOut(BaseModel):
    id: str
    tracking_id: str
    category: IssueCategory
    description: Optional[str] = None
    status: IssueStatus

    latitude: float
    longitude: float

    created_at: datetime
    updated_at: datetime

    has_photo: bool = False

    class Config:
        from_attributes = True


class IssueDetailOut(IssueOut):
    status_updates: List[StatusUpdateOut] = []


def issue_out(obj, detail: bool = False) -> IssueOut:
    schema = IssueDetailOut if detail else IssueOut
    out = schema.model_validate(obj)
    out.has_photo = obj.photo_content_type is not None
    return out
