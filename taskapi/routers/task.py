# taskapi/routers/task.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from taskapi.db.session import get_session
from taskapi.dependencies.auth import get_current_user
from taskapi.models.task import TaskStatus
from taskapi.models.user import User
from taskapi.schemas.common import ApiResponse
from taskapi.schemas.task import (
    Pagination,
    TaskCreate,
    TaskData,
    TaskListData,
    TaskOut,
    TaskUpdate,
)
from taskapi.services.task_service import MAX_LIMIT, TaskService

router = APIRouter(prefix="/tasks", tags=["Tasks"])

StatusFilter = Literal["ALL", "PENDING", "IN_PROGRESS", "COMPLETED"]


def get_task_service(
    db: Session = Depends(get_session),
    user: User = Depends(get_current_user),
) -> TaskService:
    return TaskService(db, user.id)


def _task_data(task) -> TaskData:
    return TaskData(task=TaskOut.model_validate(task))


@router.get("", response_model=ApiResponse[TaskListData], response_model_exclude_unset=True)
def list_tasks(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_LIMIT),
    status_filter: Optional[StatusFilter] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    service: TaskService = Depends(get_task_service),
):
    wanted = None if status_filter in (None, "ALL") else TaskStatus(status_filter)
    result = service.list(page=page, limit=limit, status=wanted, search=search)
    return ApiResponse[TaskListData](
        success=True,
        data=TaskListData(
            tasks=[TaskOut.model_validate(t) for t in result.tasks],
            pagination=Pagination(
                page=result.page,
                limit=result.limit,
                total=result.total,
                total_pages=result.total_pages,
            ),
        ),
    )


@router.get("/{task_id}", response_model=ApiResponse[TaskData], response_model_exclude_unset=True)
def get_task(task_id: str, service: TaskService = Depends(get_task_service)):
    return ApiResponse[TaskData](success=True, data=_task_data(service.get(task_id)))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[TaskData],
    response_model_exclude_unset=True,
)
def create_task(body: TaskCreate, service: TaskService = Depends(get_task_service)):
    task = service.create(body.title, body.description, body.status)
    return ApiResponse[TaskData](
        success=True,
        message="Task created successfully",
        data=_task_data(task),
    )


@router.patch("/{task_id}", response_model=ApiResponse[TaskData], response_model_exclude_unset=True)
def update_task(
    task_id: str,
    body: TaskUpdate,
    service: TaskService = Depends(get_task_service),
):
    task = service.update(task_id, body.to_patch())
    return ApiResponse[TaskData](
        success=True,
        message="Task updated successfully",
        data=_task_data(task),
    )


@router.delete("/{task_id}", response_model=ApiResponse[None], response_model_exclude_unset=True)
def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    service.delete(task_id)
    return ApiResponse[None](success=True, message="Task deleted successfully")


@router.post(
    "/{task_id}/toggle",
    response_model=ApiResponse[TaskData],
    response_model_exclude_unset=True,
)
def toggle_task(task_id: str, service: TaskService = Depends(get_task_service)):
    task = service.toggle(task_id)
    return ApiResponse[TaskData](
        success=True,
        message="Task status toggled successfully",
        data=_task_data(task),
    )
