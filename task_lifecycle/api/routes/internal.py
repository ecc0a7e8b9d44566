"""Internal API Routes.

Привилегированные callbacks внешнего worker'а. Секрет проверяется до
чтения тела запроса, поэтому при неверном секрете ответ всегда 403.
"""

from typing import TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ValidationError

from task_lifecycle.api.schemas import (
    CompleteTaskRequest,
    FailTaskRequest,
    InternalTaskRequest,
    TransitionResponse,
)
from task_lifecycle.core.dependencies import TaskServiceDep, verify_internal_secret
from task_lifecycle.shared.errors import (
    InvalidTransitionError,
    MalformedRequestError,
    NotFoundError,
    StoreUnavailableError,
    TaskNotFoundError,
    UnauthorizedError,
)

RequestT = TypeVar("RequestT", bound=BaseModel)

router = APIRouter(
    prefix="/internal/task",
    tags=["internal"],
    dependencies=[Depends(verify_internal_secret)],
    responses={
        400: InvalidTransitionError.openapi_response(),
        403: UnauthorizedError.openapi_response(),
        404: TaskNotFoundError.openapi_response(),
        503: StoreUnavailableError.openapi_response(),
    },
)


async def parse_body(request: Request, model: type[RequestT]) -> RequestT:
    """Распарсить тело запроса в модель.

    Args:
        request: HTTP запрос
        model: Pydantic модель тела

    Returns:
        Провалидированная модель

    Raises:
        MalformedRequestError: Если тело не JSON или не проходит валидацию

    """
    raw = await request.body()
    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedRequestError(
            details={"errors": jsonable_encoder(e.errors(include_url=False, include_context=False))},
        ) from e


@router.post("/start", response_model=TransitionResponse, summary="Задача взята в работу")
async def start_task(request: Request, service: TaskServiceDep) -> TransitionResponse:
    """pending -> running."""
    body = await parse_body(request, InternalTaskRequest)
    outcome = await service.start(body.task_id)
    return TransitionResponse(task_id=body.task_id, outcome=outcome)


@router.post("/complete", response_model=TransitionResponse, summary="Задача завершена")
async def complete_task(request: Request, service: TaskServiceDep) -> TransitionResponse:
    """running -> completed, сохраняет result."""
    body = await parse_body(request, CompleteTaskRequest)
    outcome = await service.complete(body.task_id, body.result)
    return TransitionResponse(task_id=body.task_id, outcome=outcome)


@router.post("/fail", response_model=TransitionResponse, summary="Задача провалена")
async def fail_task(request: Request, service: TaskServiceDep) -> TransitionResponse:
    """running -> failed, сохраняет error."""
    body = await parse_body(request, FailTaskRequest)
    outcome = await service.fail(body.task_id, body.error)
    return TransitionResponse(task_id=body.task_id, outcome=outcome)


# Подключается после router: неизвестный путь под /internal без секрета -> 403, с секретом -> 404
fallback_router = APIRouter(prefix="/internal", dependencies=[Depends(verify_internal_secret)])


@fallback_router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def unknown_internal_path(path: str) -> None:
    """Неизвестный привилегированный endpoint."""
    raise NotFoundError(message=f"Internal endpoint '/internal/{path}' не найден", details={"path": path})
