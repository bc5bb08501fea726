# weatherflow/main.py
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .engine import WorkflowEngine
from .errors import EngineError, RequestValidationFailed, StorageError
from .logging_utils import setup_logging
from .models import ExecuteRequest, ExecutionResults, ExecutionState, Workflow
from .nodes.builtin import REQUIRED_FORM_FIELDS
from .nodes.condition import OPERATORS
from .registry import build_registry
from .repository import SQLWorkflowRepository, WorkflowRepository
from .weather import OpenMeteoClient, WeatherClient

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def validate_execute_request(req: ExecuteRequest) -> None:
    # unknown operators are rejected here even though the condition node tolerates them
    if req.form_data is None:
        raise RequestValidationFailed("formData")
    for field in REQUIRED_FORM_FIELDS:
        value = req.form_data.get(field)
        if not isinstance(value, str) or value == "":
            raise RequestValidationFailed(field)
    if req.condition.operator not in OPERATORS:
        raise RequestValidationFailed("operator", kind="invalid")


def is_valid_workflow_id(workflow_id: str) -> bool:
    try:
        uuid.UUID(workflow_id)
    except ValueError:
        return False
    return True


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[WorkflowRepository] = None,
    weather_client: Optional[WeatherClient] = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    if repository is None:
        repository = SQLWorkflowRepository(settings.DATABASE_URL, seed=settings.SEED_SAMPLE_WORKFLOW)
    owned_client = None
    if weather_client is None:
        owned_client = OpenMeteoClient(settings.WEATHER_API_URL, timeout=settings.WEATHER_API_TIMEOUT)
        weather_client = owned_client

    registry = build_registry(weather_client)
    engine = WorkflowEngine(registry, max_steps=settings.MAX_STEPS)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await repository.init()
        logger.info("%s ready", settings.APP_NAME)
        yield
        await repository.close()
        if owned_client is not None:
            await owned_client.aclose()

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        allow_credentials=True,
    )

    @app.exception_handler(RequestValidationError)
    async def handle_invalid_body(request: Request, exc: RequestValidationError):
        return error_response(400, "invalid request body")

    @app.exception_handler(RequestValidationFailed)
    async def handle_invalid_input(request: Request, exc: RequestValidationFailed):
        return error_response(400, str(exc))

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        logger.error("workflow storage failed on %s", request.url.path, exc_info=exc)
        return error_response(500, "internal server error")

    @app.exception_handler(EngineError)
    async def handle_engine_error(request: Request, exc: EngineError):
        logger.error("workflow execution failed on %s", request.url.path, exc_info=exc)
        return error_response(500, "internal server error")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    router = APIRouter(prefix=settings.API_PREFIX)

    # list the node types this engine can execute
    @router.get("/node-types")
    async def list_node_types():
        return {"nodeTypes": sorted(registry)}

    @router.get(
        "/workflows/{workflow_id}",
        response_model=Workflow,
        response_model_exclude_none=True,
    )
    async def get_workflow(workflow_id: str):
        logger.debug("getting workflow %s", workflow_id)
        if not is_valid_workflow_id(workflow_id):
            return error_response(400, "invalid workflow id")
        workflow = await repository.get(workflow_id)
        if workflow is None:
            return error_response(404, "workflow not found")
        return workflow

    @router.post(
        "/workflows/{workflow_id}/execute",
        response_model=ExecutionResults,
        response_model_exclude_none=True,
    )
    async def execute_workflow(workflow_id: str, payload: ExecuteRequest):
        logger.debug("executing workflow %s", workflow_id)
        if not is_valid_workflow_id(workflow_id):
            return error_response(400, "invalid workflow id")
        validate_execute_request(payload)

        workflow = await repository.get(workflow_id)
        if workflow is None:
            return error_response(404, "workflow not found")

        state = ExecutionState(
            form_data=payload.form_data,
            condition=payload.condition,
            variables={},
        )
        return await engine.execute(workflow, state)

    app.include_router(router)
    return app


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run("weatherflow.main:create_app", factory=True, host=settings.HOST, port=settings.PORT)
