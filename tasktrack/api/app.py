"""FastAPI web application for tasktrack."""

import asyncio
import logging
import os
from contextlib import asynccontextmanager, suppress
from datetime import date
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from tasktrack.api.schemas import (
    CategoryRequest,
    ClearCompletedResponse,
    DueSoonResponse,
    ImportResponse,
    MoveRequest,
    SubtaskCreateRequest,
    SubtaskResponse,
    TaskCreateRequest,
    TaskListResponse,
    TaskResponse,
    TaskUpdateRequest,
)
from tasktrack.database.database import SessionLocal, get_db, init_db
from tasktrack.database.repository import TaskRepository
from tasktrack.engine.filtering import StatusFilter, TaskQuery
from tasktrack.engine.grouping import TaskView
from tasktrack.errors import ValidationError
from tasktrack.models.constants import FILTER_ALL
from tasktrack.models.task import Task
from tasktrack.notifications.dispatcher import LoggingNotifier, build_alert, run_due_soon_monitor
from tasktrack.serialization.export import export_filename

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def _load_task_snapshot() -> List[Task]:
    db = SessionLocal()
    try:
        return TaskRepository(db).list_tasks()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    monitor = None
    interval = float(os.getenv("DUE_SOON_CHECK_INTERVAL_SEC", "0") or 0)
    if interval > 0:
        monitor = asyncio.create_task(
            run_due_soon_monitor(_load_task_snapshot, LoggingNotifier(), interval_seconds=interval)
        )
        logger.info(f"Due-soon monitor running every {interval:g}s")
    try:
        yield
    finally:
        if monitor is not None:
            monitor.cancel()
            with suppress(asyncio.CancelledError):
                await monitor


# Initialize FastAPI app
app = FastAPI(
    title="tasktrack API",
    description="Personal task tracker: categories, priorities, due dates, recurrence and subtasks",
    version=VERSION,
    lifespan=lifespan,
)


def get_repository(db: Session = Depends(get_db)) -> TaskRepository:
    """Task store for the current request."""
    return TaskRepository(db)


def _not_found(task_id: int, subtask_id: Optional[int] = None) -> HTTPException:
    if subtask_id is not None:
        return HTTPException(status_code=404, detail=f"Subtask {subtask_id} of task {task_id} not found")
    return HTTPException(status_code=404, detail=f"Task {task_id} not found")


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


@app.get("/tasks", response_model=TaskView)
def view_tasks(
    search: str = "",
    category: str = FILTER_ALL,
    priority: str = FILTER_ALL,
    status: StatusFilter = StatusFilter.ALL,
    repo: TaskRepository = Depends(get_repository),
):
    """Filtered, sorted view grouped by category, plus completion stats."""
    try:
        query = TaskQuery(search=search, category=category, priority=priority, status=status)
    except PydanticValidationError as e:
        raise HTTPException(status_code=422, detail=f"Invalid filter: {e.errors()[0]['msg']}")
    return repo.view(query)


@app.post("/tasks", response_model=TaskResponse, status_code=201)
def create_task(body: TaskCreateRequest, repo: TaskRepository = Depends(get_repository)):
    """Create a task."""
    try:
        task = repo.create(
            title=body.title,
            category=body.category,
            priority=body.priority,
            due_date=body.due_date,
            recurrence=body.recurrence,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return TaskResponse(task=task)


@app.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, repo: TaskRepository = Depends(get_repository)):
    task = repo.get(task_id)
    if task is None:
        raise _not_found(task_id)
    return TaskResponse(task=task)


@app.patch("/tasks/{task_id}", response_model=TaskResponse)
def edit_task(task_id: int, body: TaskUpdateRequest, repo: TaskRepository = Depends(get_repository)):
    """Edit title, category, priority, due date or recurrence."""
    try:
        task = repo.edit(task_id, body.model_dump(exclude_unset=True))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if task is None:
        raise _not_found(task_id)
    return TaskResponse(task=task)


@app.delete("/tasks/{task_id}", status_code=204)
def delete_task(task_id: int, repo: TaskRepository = Depends(get_repository)):
    """Delete a task; deleting an unknown task is a no-op."""
    repo.delete(task_id)
    return Response(status_code=204)


@app.post("/tasks/{task_id}/toggle", response_model=TaskResponse)
def toggle_task(task_id: int, repo: TaskRepository = Depends(get_repository)):
    """Toggle completion (recurring tasks reopen with their next due date)."""
    task = repo.toggle(task_id)
    if task is None:
        raise _not_found(task_id)
    return TaskResponse(task=task)


@app.post("/tasks/clear-completed", response_model=ClearCompletedResponse)
def clear_completed(repo: TaskRepository = Depends(get_repository)):
    return ClearCompletedResponse(removed_count=repo.clear_completed())


@app.post("/tasks/{task_id}/subtasks", response_model=SubtaskResponse, status_code=201)
def add_subtask(task_id: int, body: SubtaskCreateRequest, repo: TaskRepository = Depends(get_repository)):
    try:
        subtask = repo.add_subtask(task_id, body.title)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if subtask is None:
        raise _not_found(task_id)
    return SubtaskResponse(task_id=task_id, subtask=subtask)


@app.post("/tasks/{task_id}/subtasks/{subtask_id}/toggle", response_model=SubtaskResponse)
def toggle_subtask(task_id: int, subtask_id: int, repo: TaskRepository = Depends(get_repository)):
    subtask = repo.toggle_subtask(task_id, subtask_id)
    if subtask is None:
        raise _not_found(task_id, subtask_id)
    return SubtaskResponse(task_id=task_id, subtask=subtask)


@app.delete("/tasks/{task_id}/subtasks/{subtask_id}", status_code=204)
def delete_subtask(task_id: int, subtask_id: int, repo: TaskRepository = Depends(get_repository)):
    repo.delete_subtask(task_id, subtask_id)
    return Response(status_code=204)


@app.post("/tasks/{task_id}/category", response_model=TaskResponse)
def set_task_category(task_id: int, body: CategoryRequest, repo: TaskRepository = Depends(get_repository)):
    """Recategorize while a drag is in progress; safe to repeat."""
    task = repo.set_category(task_id, body.category)
    if task is None:
        raise _not_found(task_id)
    return TaskResponse(task=task)


@app.post("/tasks/{task_id}/move", response_model=TaskListResponse)
def move_task(task_id: int, body: MoveRequest, repo: TaskRepository = Depends(get_repository)):
    """Finish a drag: reorder onto a task or recategorize onto a category."""
    return TaskListResponse(tasks=repo.commit_move(task_id, body.target))


@app.get("/export/{fmt}")
def export_tasks(fmt: str, repo: TaskRepository = Depends(get_repository)):
    """Download the collection as JSON or CSV."""
    if fmt == "json":
        content, media_type = repo.export_json(), "application/json"
    elif fmt == "csv":
        content, media_type = repo.export_csv(), "text/csv"
    else:
        raise HTTPException(status_code=404, detail=f"Unsupported export format: {fmt}")
    filename = export_filename(fmt, date.today())
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.post("/import", response_model=ImportResponse)
async def import_tasks(request: Request, repo: TaskRepository = Depends(get_repository)):
    """Append tasks from a JSON export document (sent as the raw request body)."""
    content = await request.body()
    try:
        imported = await run_in_threadpool(repo.import_json, content)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return ImportResponse(imported_count=len(imported), tasks=imported)


@app.get("/notifications/due-soon", response_model=DueSoonResponse)
def due_soon(repo: TaskRepository = Depends(get_repository)):
    """Tasks entering the due-soon window right now."""
    return DueSoonResponse(alerts=[build_alert(task) for task in repo.due_soon()])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
