"""Константы для Task Lifecycle Service.

Централизованное хранилище всех магических чисел и строк.
"""

# === HTTP ===
INTERNAL_SECRET_HEADER = "x-internal-secret"
TRACE_ID_HEADER = "X-Trace-Id"

# === Хранилища ===
CACHE_KEY_TEMPLATE = "{prefix}task:{task_id}"
DEFAULT_TABLE_NAME = "tasks"
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./tasks.db"
DEFAULT_REDIS_URL = "redis://localhost:6379/0"

# === Dispatch ===
DEFAULT_DISPATCH_EVENT_TYPE = "process-task"
DEFAULT_DISPATCH_USER_AGENT = "task-lifecycle-service"
DEFAULT_DISPATCH_TIMEOUT = 10.0
DEFAULT_DRAIN_TIMEOUT = 5.0
DISPATCH_ACCEPTED_STATUS = 204

# === Payload ===
DEFAULT_FAILURE_ERROR = "Unknown error"
