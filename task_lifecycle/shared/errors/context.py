"""trace_id текущего запроса.

trace_id_middleware берёт его из заголовка X-Trace-Id или создаёт новый,
обработчики ошибок кладут его в тело ответа, логгер - в каждую запись.
Вне запроса (фоновый dispatch, тесты) значение создаётся при первом чтении.
"""

from contextvars import ContextVar
from uuid import uuid4

trace_id_var: ContextVar[str | None] = ContextVar("trace_id", default=None)


def new_trace_id() -> str:
    """Сгенерировать trace_id."""
    return uuid4().hex


def get_trace_id() -> str:
    """trace_id текущего контекста (создаётся при первом обращении)."""
    trace_id = trace_id_var.get()
    if trace_id is None:
        trace_id = set_trace_id(None)
    return trace_id


def set_trace_id(trace_id: str | None) -> str:
    """Выставить trace_id для текущего контекста.

    Args:
        trace_id: Значение из заголовка запроса; пустое заменяется новым.

    Returns:
        Выставленный trace_id.

    """
    trace_id = trace_id or new_trace_id()
    trace_id_var.set(trace_id)
    return trace_id
