"""SQL durable store для задач.

SQLAlchemy (async) поверх таблицы tasks:

    tasks(id TEXT PK, status TEXT, created_at TEXT, updated_at TEXT,
          result TEXT NULL, error TEXT NULL)

result/error хранятся как JSON (orjson), время - ISO 8601 в UTC.
Условная запись реализована как UPDATE ... WHERE id = :id AND status = :expected,
поэтому хранилище является точкой сериализации переходов.
"""

from datetime import datetime
from typing import Any

import orjson
from sqlalchemy import Column, MetaData, String, Table, Text, insert, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from task_lifecycle.core.config import DatabaseSettings
from task_lifecycle.core.enums import TaskStatus
from task_lifecycle.domain.models import Task
from task_lifecycle.shared.errors import StoreUnavailableError, TaskAlreadyExistsError, TaskNotFoundError
from task_lifecycle.shared.logging import get_logger
from task_lifecycle.storage.base import DurableTaskStore

logger = get_logger()

STORE_NAME = "durable"


def build_tasks_table(metadata: MetaData, name: str) -> Table:
    """Описать таблицу задач.

    Args:
        metadata: MetaData для регистрации таблицы
        name: Имя таблицы

    Returns:
        SQLAlchemy Table

    """
    return Table(
        name,
        metadata,
        Column("id", String(64), primary_key=True),
        Column("status", String(16), nullable=False),
        Column("created_at", String(40), nullable=False),
        Column("updated_at", String(40), nullable=False),
        Column("result", Text, nullable=True),
        Column("error", Text, nullable=True),
    )


def _dump_payload(value: Any | None) -> str | None:
    if value is None:
        return None
    return orjson.dumps(value).decode("utf-8")


def _load_payload(value: str | None) -> Any | None:
    if value is None:
        return None
    return orjson.loads(value)


class SqlTaskStore(DurableTaskStore):
    """DurableTaskStore на SQLAlchemy AsyncEngine.

    Attributes:
        engine: Async engine
        table: Таблица задач

    """

    supports_conditional_update = True

    def __init__(self, engine: AsyncEngine, table_name: str = "tasks") -> None:
        """Инициализировать хранилище.

        Args:
            engine: SQLAlchemy AsyncEngine
            table_name: Имя таблицы задач

        """
        self.engine = engine
        self.metadata = MetaData()
        self.table = build_tasks_table(self.metadata, table_name)

    async def init_schema(self) -> None:
        """Создать таблицу, если её нет."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(self.metadata.create_all)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(STORE_NAME, "init_schema", str(e)) from e

        logger.info("Схема durable store готова", table=self.table.name)

    async def insert(self, task: Task) -> None:
        """Вставить новую задачу.

        Args:
            task: Задача в статусе pending

        Raises:
            TaskAlreadyExistsError: Если ID уже занят
            StoreUnavailableError: Если БД недоступна

        """
        stmt = insert(self.table).values(
            id=task.id,
            status=task.status.value,
            created_at=task.created_at.isoformat(),
            updated_at=task.updated_at.isoformat(),
            result=_dump_payload(task.result),
            error=_dump_payload(task.error),
        )
        try:
            async with self.engine.begin() as conn:
                await conn.execute(stmt)
        except IntegrityError as e:
            logger.error("Коллизия ID задачи", task_id=task.id, error=str(e))
            raise TaskAlreadyExistsError(task.id) from e
        except SQLAlchemyError as e:
            raise StoreUnavailableError(STORE_NAME, "insert", str(e)) from e

    async def get_by_id(self, task_id: str) -> Task:
        """Прочитать задачу.

        Args:
            task_id: ID задачи

        Returns:
            Task

        Raises:
            TaskNotFoundError: Если задачи нет
            StoreUnavailableError: Если БД недоступна

        """
        stmt = select(self.table).where(self.table.c.id == task_id)
        try:
            async with self.engine.connect() as conn:
                row = (await conn.execute(stmt)).mappings().first()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(STORE_NAME, "get_by_id", str(e)) from e

        if row is None:
            raise TaskNotFoundError(task_id)

        return Task(
            id=row["id"],
            status=TaskStatus(row["status"]),
            result=_load_payload(row["result"]),
            error=_load_payload(row["error"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    async def update_status(
        self,
        task_id: str,
        status: TaskStatus,
        result: Any | None,
        error: Any | None,
        updated_at: datetime,
        expected_status: TaskStatus | None = None,
    ) -> bool:
        """Записать новый статус (опционально как compare-and-swap).

        Args:
            task_id: ID задачи
            status: Новый статус
            result: Результат (для completed)
            error: Ошибка (для failed)
            updated_at: Время перехода
            expected_status: Статус, который должен быть у строки сейчас

        Returns:
            True если строка изменена

        Raises:
            StoreUnavailableError: Если БД недоступна

        """
        stmt = (
            update(self.table)
            .where(self.table.c.id == task_id)
            .values(
                status=TaskStatus(status).value,
                updated_at=updated_at.isoformat(),
                result=_dump_payload(result),
                error=_dump_payload(error),
            )
        )
        if expected_status is not None:
            stmt = stmt.where(self.table.c.status == TaskStatus(expected_status).value)

        try:
            async with self.engine.begin() as conn:
                res = await conn.execute(stmt)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(STORE_NAME, "update_status", str(e)) from e

        changed = bool(res.rowcount)
        logger.debug(
            "Durable update",
            task_id=task_id,
            status=TaskStatus(status).value,
            expected=expected_status.value if expected_status else None,
            changed=changed,
        )
        return changed

    async def health_check(self) -> bool:
        """Проверить доступность БД.

        Returns:
            True если БД отвечает

        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error("Durable store недоступен", error=str(e))
            return False

    async def close(self) -> None:
        """Закрыть пул соединений."""
        await self.engine.dispose()


def create_sql_task_store(settings: DatabaseSettings) -> SqlTaskStore:
    """Создать SqlTaskStore по настройкам.

    Args:
        settings: Настройки БД

    Returns:
        SqlTaskStore (схема ещё не создана, см. init_schema)

    """
    engine = create_async_engine(settings.url, echo=settings.echo)
    logger.info("SqlTaskStore создан", dialect=engine.dialect.name, table=settings.table_name)
    return SqlTaskStore(engine, table_name=settings.table_name)
