import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .auth import get_current_owner
from .config import settings
from .database import DocumentStore, close_db, get_store
from .errors import StoreError, TaskTrackerError, ValidationError, describe_errors, summarize_errors
from .logging_setup import setup_logging
from .schemas import DeleteConfirmation, Task, TaskCreate, TaskUpdate
from .service import TaskService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(level=settings.log_level, log_dir=settings.log_dir)
    try:
        await get_store().ensure_indexes()
    except StoreError:
        logger.warning("Could not ensure indexes at startup; continuing without them")
    yield
    await close_db()


app = FastAPI(title="Task Tracker API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TaskTrackerError)
async def task_tracker_error_handler(request: Request, exc: TaskTrackerError):
    if isinstance(exc, StoreError):
        logger.error("%s %s failed: store error", request.method, request.url.path)
    content = {"message": exc.message}
    if isinstance(exc, ValidationError) and exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # Report malformed input as 400 rather than FastAPI's default 422
    described = describe_errors(exc.errors())
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"message": summarize_errors(described), "errors": described},
    )


def get_task_service(store: DocumentStore = Depends(get_store)) -> TaskService:
    return TaskService(store)


@app.get("/", tags=["health"])
async def root():
    return {"message": "Task Tracker API running"}


@app.get("/tasks", response_model=List[Task])
async def list_tasks(
    # Blank ?status= means no filter; TaskService.list rejects unknown values
    status: Optional[str] = None,
    owner: str = Depends(get_current_owner),
    service: TaskService = Depends(get_task_service),
):
    return await service.list(owner, status)


@app.post("/tasks", response_model=Task, status_code=201)
async def create_task(
    payload: TaskCreate,
    owner: str = Depends(get_current_owner),
    service: TaskService = Depends(get_task_service),
):
    return await service.create(owner, payload)


@app.get("/tasks/{task_id}", response_model=Task)
async def get_task(
    task_id: str,
    owner: str = Depends(get_current_owner),
    service: TaskService = Depends(get_task_service),
):
    return await service.get(owner, task_id)


@app.put("/tasks/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    owner: str = Depends(get_current_owner),
    service: TaskService = Depends(get_task_service),
):
    return await service.update(owner, task_id, payload)


@app.delete("/tasks/{task_id}", response_model=DeleteConfirmation)
async def remove_task(
    task_id: str,
    owner: str = Depends(get_current_owner),
    service: TaskService = Depends(get_task_service),
):
    return await service.delete(owner, task_id)


def run() -> None:
    import uvicorn

    setup_logging(level=settings.log_level, log_dir=settings.log_dir)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
