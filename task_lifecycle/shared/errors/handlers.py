"""Exception handlers for FastAPI.

Обработчики исключений для FastAPI приложения.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from task_lifecycle.core.constants import TRACE_ID_HEADER
from task_lifecycle.shared.errors.base import AppException
from task_lifecycle.shared.errors.context import get_trace_id
from task_lifecycle.shared.errors.domain_errors import MalformedRequestError
from task_lifecycle.shared.errors.schemas import ErrorResponse


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Обработчик доменных исключений.

    Args:
        request: HTTP запрос.
        exc: Исключение AppException.

    Returns:
        JSON ответ с ошибкой.

    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"Business error: {exc.code}",
        error_code=exc.code,
        message=exc.message,
        details=exc.details,
        path=request.url.path,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
        headers={"X-Error-Code": exc.code, TRACE_ID_HEADER: get_trace_id()},
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Обработчик ошибок валидации Pydantic.

    Ошибки валидации входных данных отдаются как 400 MALFORMED_REQUEST.

    Args:
        request: HTTP запрос.
        exc: Исключение валидации.

    Returns:
        JSON ответ с ошибкой валидации.

    """
    errors = jsonable_encoder(exc.errors())
    logger.warning("Validation error", errors=errors, path=request.url.path)

    error = MalformedRequestError(details={"errors": errors})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error.to_response().model_dump(),
        headers={"X-Error-Code": error.code, TRACE_ID_HEADER: get_trace_id()},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Последний обработчик для непредвиденных ошибок.

    Args:
        request: HTTP запрос.
        exc: Любое исключение.

    Returns:
        JSON ответ с общей ошибкой.

    """
    trace_id = get_trace_id()

    logger.opt(exception=exc).error(
        "Unhandled exception",
        exception_type=type(exc).__name__,
        exception_message=str(exc),
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="INTERNAL_SERVER_ERROR",
            message="Внутренняя ошибка сервера",
            details={},
            trace_id=trace_id,
        ).model_dump(),
        headers={TRACE_ID_HEADER: trace_id},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Зарегистрировать обработчики исключений в FastAPI.

    Args:
        app: Экземпляр FastAPI приложения.

    """
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)

    logger.debug("Exception handlers registered")
