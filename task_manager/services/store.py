import uuid
from datetime import datetime, timezone
from typing import List, Optional

from loguru import logger
from pydantic import ValidationError as SchemaError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from task_manager.core.config import settings
from task_manager.core.errors import NotFoundError, StoreUnavailableError, ValidationError
from task_manager.schemas.task import TaskCreate, TaskFilter, TaskResponse, TaskStats, TaskUpdate
from task_manager.services.query import compute_stats, select_tasks


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskStore:
    """Authoritative task collection kept as JSON documents in Redis.

    Every record lives under ``<DATA_STORE_NAME>:<id>``. The sorted set
    ``INDEX_NAME`` holds the live ids scored by an insertion sequence, which is
    what gives listing its stable insertion order.
    """

    def __init__(self, redis: Redis):
        self.redis = redis

    def _get_task_key(self, task_id: str) -> str:
        return f"{settings.DATA_STORE_NAME}:{task_id}"

    @staticmethod
    def _dump(task: TaskResponse) -> str:
        return task.model_dump_json(by_alias=True)

    async def _load_all(self) -> List[TaskResponse]:
        try:
            task_ids = await self.redis.zrange(settings.INDEX_NAME, 0, -1)
            if not task_ids:
                return []
            raw_data_list = await self.redis.mget([self._get_task_key(tid) for tid in task_ids])
        except RedisError as e:
            logger.error(f"❌ Redis error while reading tasks: {e}")
            raise StoreUnavailableError(str(e)) from e

        tasks = []
        for raw in raw_data_list:
            # Index entry outlived its document (deleted between ZRANGE and MGET)
            if not raw:
                continue
            try:
                tasks.append(TaskResponse.model_validate_json(raw))
            except SchemaError as e:
                logger.error(f"❌ Skipping corrupt task document: {e}")
        return tasks

    async def list_tasks(self, task_filter: TaskFilter = TaskFilter.ALL, search: Optional[str] = None) -> List[TaskResponse]:
        tasks = await self._load_all()
        return select_tasks(tasks, task_filter, search)

    async def get_stats(self) -> TaskStats:
        return compute_stats(await self._load_all())

    async def create_task(self, task_in: TaskCreate) -> TaskResponse:
        text = (task_in.text or "").strip()
        if not text:
            logger.warning("Rejected task creation without text")
            raise ValidationError("Task text is required")

        now = _utcnow()
        task = TaskResponse(
            id=str(uuid.uuid4()),
            text=text,
            completed=False,
            important=task_in.important,
            created_at=now,
            updated_at=now,
        )

        try:
            seq = await self.redis.incr(settings.SEQUENCE_KEY)
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.set(self._get_task_key(task.id), self._dump(task))
                pipe.zadd(settings.INDEX_NAME, {task.id: seq})
                await pipe.execute()
        except RedisError as e:
            logger.error(f"❌ Redis error during create: {e}")
            raise StoreUnavailableError(str(e)) from e

        logger.success(f"✅ Created task {task.id}")
        return task

    async def update_task(self, task_id: str, changes: TaskUpdate) -> TaskResponse:
        updates = changes.model_dump(exclude_unset=True)
        for field, value in updates.items():
            if value is None:
                raise ValidationError(f"Field '{field}' cannot be null")
        if "text" in updates:
            updates["text"] = updates["text"].strip()
            if not updates["text"]:
                logger.warning(f"Rejected empty text update for task {task_id}")
                raise ValidationError("Task text is required")

        task_key = self._get_task_key(task_id)

        async def apply_changes(pipe) -> TaskResponse:
            raw = await pipe.get(task_key)
            if not raw:
                raise NotFoundError("Task not found")
            task = TaskResponse.model_validate_json(raw)
            # updatedAt is refreshed even when nothing else changes
            task = task.model_copy(update={**updates, "updated_at": max(_utcnow(), task.created_at)})
            pipe.multi()
            pipe.set(task_key, self._dump(task))
            return task

        try:
            # WATCH/MULTI: a concurrent write to the record (or its deletion)
            # aborts EXEC and the merge is retried on the fresh document
            task = await self.redis.transaction(apply_changes, task_key, value_from_callable=True)
        except RedisError as e:
            logger.error(f"❌ Redis error during update of {task_id}: {e}")
            raise StoreUnavailableError(str(e)) from e

        logger.info(f"📝 Updated task {task_id}: {sorted(updates)}")
        return task

    async def delete_task(self, task_id: str) -> None:
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                pipe.delete(self._get_task_key(task_id))
                pipe.zrem(settings.INDEX_NAME, task_id)
                results = await pipe.execute()
        except RedisError as e:
            logger.error(f"❌ Redis error during delete of {task_id}: {e}")
            raise StoreUnavailableError(str(e)) from e

        if not results[0]:
            raise NotFoundError("Task not found")
        logger.info(f"🗑️ Deleted task {task_id}")

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except (RedisError, OSError) as e:
            logger.warning(f"🟠 Redis ping failed: {e}")
            return False
