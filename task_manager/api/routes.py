from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from redis.asyncio import Redis

from task_manager.core.config import settings
from task_manager.schemas.task import (
    MessageResponse,
    TaskCreate,
    TaskFilter,
    TaskResponse,
    TaskStats,
    TaskUpdate,
)
from task_manager.services.store import TaskStore

router = APIRouter()


async def get_redis() -> Redis:
    client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
    try:
        yield client
    finally:
        await client.aclose()


def get_store(redis: Redis = Depends(get_redis)) -> TaskStore:
    return TaskStore(redis)


@router.get("/tasks", response_model=List[TaskResponse])
async def list_tasks(
    filter_: Optional[str] = Query(None, alias="filter"),
    search: Optional[str] = None,
    store: TaskStore = Depends(get_store),
):
    return await store.list_tasks(TaskFilter.parse(filter_), search)


# Registered before the /tasks/{task_id} routes
@router.get("/tasks/stats", response_model=TaskStats)
async def get_task_stats(store: TaskStore = Depends(get_store)):
    return await store.get_stats()


@router.post("/tasks", response_model=TaskResponse, status_code=201)
async def create_task(task: TaskCreate, store: TaskStore = Depends(get_store)):
    return await store.create_task(task)


@router.put("/tasks/{task_id}", response_model=TaskResponse)
async def update_task(task_id: str, changes: TaskUpdate, store: TaskStore = Depends(get_store)):
    return await store.update_task(task_id, changes)


@router.delete("/tasks/{task_id}", response_model=MessageResponse)
async def delete_task(task_id: str, store: TaskStore = Depends(get_store)):
    await store.delete_task(task_id)
    return {"message": "Task deleted successfully"}
