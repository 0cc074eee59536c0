from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, col, select

from taskapi.core.errors import NotFound, ValidationError
from taskapi.db.types import utcnow
from taskapi.models.task import Task, TaskStatus
from taskapi.schemas.task import TaskPatch

log = logging.getLogger(__name__)

MAX_LIMIT = 100
# OFFSET/LIMIT는 DB 쪽에서 64bit 정수로 바인딩됨
_MAX_OFFSET = 2**63 - 1


@dataclass
class TaskPage:
    tasks: List[Task]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)


class TaskService:
    """CRUD over the tasks of a single owner. Other users' tasks look absent."""

    def __init__(self, db: Session, user_id: UUID):
        self.db = db
        self.user_id = user_id

    def _get_owned(self, task_id: Union[str, UUID]) -> Task:
        if not isinstance(task_id, UUID):
            try:
                task_id = UUID(str(task_id))
            except ValueError:
                raise NotFound("Task not found")
        stmt = select(Task).where(Task.id == task_id, Task.user_id == self.user_id)
        task = self.db.exec(stmt).first()
        if task is None:
            raise NotFound("Task not found")
        return task

    def _save(self, task: Task) -> Task:
        task.updated_at = utcnow()
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        return task

    def list(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[TaskStatus] = None,
        search: Optional[str] = None,
    ) -> TaskPage:
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive integers")
        if limit > MAX_LIMIT:
            raise ValidationError(f"limit must be at most {MAX_LIMIT}")
        if (page - 1) * limit > _MAX_OFFSET:
            raise ValidationError("page is out of range")
        filters = [Task.user_id == self.user_id]
        if status is not None:
            filters.append(Task.status == status)
        if search:
            filters.append(col(Task.title).icontains(search, autoescape=True))

        stmt = (
            select(Task)
            .where(*filters)
            .order_by(col(Task.created_at).desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        count_stmt = select(func.count()).select_from(Task).where(*filters)

        tasks = list(self.db.exec(stmt).all())
        total = self.db.exec(count_stmt).one()
        return TaskPage(tasks=tasks, page=page, limit=limit, total=total)

    def get(self, task_id: Union[str, UUID]) -> Task:
        return self._get_owned(task_id)

    def create(
        self,
        title: str,
        description: Optional[str] = None,
        status: Optional[TaskStatus] = None,
    ) -> Task:
        if not title or not title.strip():
            raise ValidationError("Title is required")
        task = Task(
            user_id=self.user_id,
            title=title,
            description=description,
            status=status or TaskStatus.PENDING,
        )
        task = self._save(task)
        log.debug("Created task %s for user %s", task.id, self.user_id)
        return task

    def update(self, task_id: Union[str, UUID], patch: TaskPatch) -> Task:
        task = self._get_owned(task_id)
        if patch.has_title:
            task.title = patch.title
        if patch.has_description:
            task.description = patch.description
        if patch.has_status:
            task.status = patch.status
        task = self._save(task)
        log.debug("Updated task %s", task.id)
        return task

    def delete(self, task_id: Union[str, UUID]) -> None:
        task = self._get_owned(task_id)
        self.db.delete(task)
        self.db.commit()
        log.debug("Deleted task %s", task_id)

    def toggle(self, task_id: Union[str, UUID]) -> Task:
        task = self._get_owned(task_id)
        if task.status == TaskStatus.COMPLETED:
            task.status = TaskStatus.PENDING
        else:
            task.status = TaskStatus.COMPLETED
        return self._save(task)
