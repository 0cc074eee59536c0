from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import Field, field_validator

from taskapi.models.task import TaskStatus
from taskapi.schemas.common import CamelModel


def _clean_title(v: Optional[str]) -> str:
    if v is None:
        raise ValueError("Title is required")
    v = v.strip()
    if not v:
        raise ValueError("Title is required")
    return v


class TaskCreate(CamelModel):
    title: str = Field(max_length=255)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _clean_title(v)

    @field_validator("description")
    @classmethod
    def _description(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None


class TaskUpdate(CamelModel):
    # 키가 요청에 있었는지 여부는 model_fields_set으로 판단
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None

    @field_validator("title")
    @classmethod
    def _title(cls, v: Optional[str]) -> str:
        return _clean_title(v)

    @field_validator("description")
    @classmethod
    def _description(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None

    @field_validator("status")
    @classmethod
    def _status(cls, v: Optional[TaskStatus]) -> TaskStatus:
        if v is None:
            raise ValueError("Status must be one of PENDING, IN_PROGRESS, COMPLETED")
        return v

    def to_patch(self) -> "TaskPatch":
        sent = self.model_fields_set
        return TaskPatch(
            title=self.title,
            description=self.description,
            status=self.status,
            has_title="title" in sent,
            has_description="description" in sent,
            has_status="status" in sent,
        )


@dataclass
class TaskPatch:
    """Partial update. A field is applied only when its has_* flag is set."""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    has_title: bool = False
    has_description: bool = False
    has_status: bool = False


class TaskOut(CamelModel):
    id: UUID
    title: str
    description: Optional[str] = None
    status: TaskStatus
    user_id: UUID
    created_at: datetime
    updated_at: datetime


class TaskData(CamelModel):
    task: TaskOut


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class TaskListData(CamelModel):
    tasks: List[TaskOut]
    pagination: Pagination
