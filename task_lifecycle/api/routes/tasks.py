"""Tasks API Routes.

Публичные endpoints: создание задачи и polling статуса.
"""

from fastapi import APIRouter, status

from task_lifecycle.api.schemas import CreateTaskResponse, TaskResponse
from task_lifecycle.core.dependencies import TaskServiceDep
from task_lifecycle.shared.errors import StoreUnavailableError, TaskNotFoundError

router = APIRouter(prefix="/task", tags=["tasks"])


@router.post(
    "",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=CreateTaskResponse,
    summary="Создать задачу",
    description="Создаёт задачу в статусе pending и асинхронно запускает внешний backend",
    responses={503: StoreUnavailableError.openapi_response()},
)
async def create_task(service: TaskServiceDep) -> CreateTaskResponse:
    """Создать задачу.

    Args:
        service: TaskLifecycleService

    Returns:
        CreateTaskResponse с taskId

    """
    task_id = await service.create()
    return CreateTaskResponse(task_id=task_id)


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Получить задачу",
    description="Возвращает статус и результат/ошибку задачи",
    responses={
        404: TaskNotFoundError.openapi_response(),
        503: StoreUnavailableError.openapi_response(),
    },
)
async def get_task(task_id: str, service: TaskServiceDep) -> TaskResponse:
    """Получить задачу.

    Args:
        task_id: ID задачи
        service: TaskLifecycleService

    Returns:
        TaskResponse

    """
    task = await service.get(task_id)
    return TaskResponse.from_task(task)
