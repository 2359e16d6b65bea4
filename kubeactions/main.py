#!/usr/bin/env python3
"""
Kubernetes Actions - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Initializes modules
3. Exposes cluster actions over HTTP

All kubectl logic is in the modules; routes only translate requests and
results.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Awaitable, List, Optional, TypeVar

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kubeactions.config.provider import ConfigProvider, EnvConfigProvider
from kubeactions.logging_config import configure_logging, get_logging_config
from kubeactions.modules.api import (
    ErrorResponse,
    ExecuteActionRequest,
    ExecuteActionResponse,
    HealthResponse,
    ResourceItem,
    ResourceListResponse,
    TemplateActionInfo,
    TemplateActionRequest,
    TemplateActionResponse,
    translate_action,
    validate_kind,
    validate_namespace,
)
from kubeactions.modules.commands import MutationRequest, Operation
from kubeactions.modules.config import get_config
from kubeactions.modules.errors import (
    ActionValidationError,
    ClientDisconnectedError,
    KubeActionsError,
    PartialFailureError,
    UnknownActionError,
)
from kubeactions.modules.executor import ProcessExecutor
from kubeactions.modules.orchestrator import MutationOrchestrator
from kubeactions.modules.scaffolder import (
    ActionContext,
    TemplateActionRegistry,
    create_default_registry,
)

# Get configuration
config = get_config()

# Configuration provider (HTTP surface settings)
config_provider: ConfigProvider = EnvConfigProvider()
api_config = config_provider.get_api_config()

configure_logging(config.get("log_level"), api_config.base_path)
logger = logging.getLogger(__name__)

T = TypeVar("T")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle - build the executor pipeline once.
    """
    logger.info("Starting Kubernetes Actions API...")

    timeout = config.get("command_timeout")
    executor = ProcessExecutor(default_timeout=timeout)
    app.state.orchestrator = MutationOrchestrator(
        executor, binary=config.get("kubectl_binary"), timeout=timeout
    )
    app.state.template_actions = create_default_registry()

    logger.info(
        f"Using {config.get('kubectl_binary')} with a {timeout}s timeout per command"
    )
    if api_config.base_path:
        logger.info(f"Routes mounted under {api_config.base_path}")

    yield

    logger.info("Kubernetes Actions API shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="Kubernetes Actions API",
    description="Create, expose, label and delete Kubernetes resources via kubectl",
    version="1.0.0",
    lifespan=lifespan,
)

if api_config.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

router = APIRouter()


# Dependency injection helpers


def get_orchestrator(request: Request) -> MutationOrchestrator:
    """Return the orchestrator built at startup."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(503, "Service not initialized")
    return orchestrator


def get_template_actions(request: Request) -> TemplateActionRegistry:
    """Return the template action registry built at startup."""
    registry = getattr(request.app.state, "template_actions", None)
    if registry is None:
        raise HTTPException(503, "Service not initialized")
    return registry


async def run_until_disconnected(request: Request, work: Awaitable[T]) -> T:
    """
    Await ``work`` while watching the client connection.

    If the client disconnects first, the work is cancelled (which kills any
    running kubectl process) and ClientDisconnectedError is raised.
    """
    task = asyncio.ensure_future(work)
    interval = config.get("disconnect_poll_interval", 0.5)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.warning(f"Client disconnected from {request.url.path}, cancelling")
                task.cancel()
                await asyncio.wait({task})
                raise ClientDisconnectedError("Client disconnected before completion")
    finally:
        if not task.done():
            task.cancel()


def _success_message(mutation: MutationRequest) -> str:
    kind = mutation.kind.value.capitalize()
    if mutation.operation is Operation.DELETE:
        return f"Deleted {mutation.kind.value} {', '.join(mutation.names)}"
    if mutation.operation is Operation.EXPOSE:
        return f"Service {mutation.name} created and labeled successfully"
    if mutation.kind.value in ("deployment", "service"):
        return f"{kind} {mutation.name} created and labeled successfully"
    return f"{kind} {mutation.name} created successfully"


# Action Endpoints


@router.post("/execute", response_model=ExecuteActionResponse)
async def execute_action(
    payload: ExecuteActionRequest,
    request: Request,
    orchestrator: MutationOrchestrator = Depends(get_orchestrator),
):
    """
    Run one cluster action.

    Returns:
        200: Action completed
        400: Unknown action or invalid parameters
        500: kubectl failed, timed out, or could not be launched
    """
    request.state.action = payload.action
    request.state.parameters = payload.parameters
    logger.info(f"Executing Kubernetes action: {payload.action}")

    mutation = translate_action(
        payload.action, payload.parameters, config.get("default_namespace")
    )
    outcome = await run_until_disconnected(request, orchestrator.execute(mutation))
    outcome.raise_for_status()

    logger.info(f"Kubernetes action {payload.action} completed successfully")
    return ExecuteActionResponse(
        message=_success_message(mutation),
        output=outcome.output,
        action=payload.action,
        parameters=payload.parameters,
        commands=outcome.commands,
    )


@router.get("/resources/{resource_type}", response_model=ResourceListResponse)
async def list_resources(
    resource_type: str,
    request: Request,
    namespace: Optional[str] = Query(None, description="Namespace to list"),
    orchestrator: MutationOrchestrator = Depends(get_orchestrator),
):
    """
    List existing objects of one kind, e.g. to populate a delete form.

    Returns:
        200: Resource names
        400: Invalid type or namespace
        500: kubectl failed
    """
    request.state.action = "list-resources"
    request.state.parameters = {"type": resource_type, "namespace": namespace}

    kind = validate_kind(resource_type)
    namespace = validate_namespace(namespace, "namespace", config.get("default_namespace"))

    refs = await run_until_disconnected(
        request, orchestrator.list_resources(kind, namespace)
    )
    return ResourceListResponse(
        resources=[ResourceItem(name=ref.name, type=ref.kind) for ref in refs],
        namespace=namespace,
    )


# Template Action Endpoints


@router.get("/actions", response_model=List[TemplateActionInfo])
async def list_template_actions(
    registry: TemplateActionRegistry = Depends(get_template_actions),
):
    """List registered template actions and their inputs."""
    return [
        TemplateActionInfo(
            id=action.id, description=action.description, input_schema=action.input_schema
        )
        for action in registry.list()
    ]


@router.post("/actions/{action_id}", response_model=TemplateActionResponse)
async def run_template_action(
    action_id: str,
    payload: TemplateActionRequest,
    request: Request,
    registry: TemplateActionRegistry = Depends(get_template_actions),
    orchestrator: MutationOrchestrator = Depends(get_orchestrator),
):
    """
    Run a template action such as kubernetes:apply.

    Returns:
        200: Action output
        400: Invalid input
        404: Unknown action id
        500: kubectl failed
    """
    request.state.action = action_id
    request.state.parameters = payload.input

    try:
        action = registry.get(action_id)
    except UnknownActionError:
        raise HTTPException(404, f"Unknown template action: {action_id}") from None

    ctx = ActionContext(
        orchestrator=orchestrator,
        workspace_path=Path(config.get("workspace_path")),
        default_namespace=config.get("default_namespace"),
    )
    output = await run_until_disconnected(request, action.run(ctx, payload.input))
    return TemplateActionResponse(action_id=action_id, output=output)


# Health/Monitoring Endpoints


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Liveness check; does not touch the cluster.

    Returns:
        200: Service is running
    """
    return HealthResponse()


app.include_router(router, prefix=api_config.base_path)


# Error handlers


@app.exception_handler(KubeActionsError)
async def kube_actions_error_handler(request: Request, exc: KubeActionsError):
    """Translate service errors into the machine-readable error object."""
    if exc.status_code >= 500:
        logger.error(f"Kubernetes action failed: {exc}")
    else:
        logger.warning(f"Rejected request: {exc}")

    output: Optional[str] = None
    status = "failure"
    if isinstance(exc, PartialFailureError):
        status = "partial_success"
        output = exc.completed_output

    body = ErrorResponse(
        error=exc.message,
        error_type=exc.error_type,
        status=status,
        output=output,
        action=getattr(request.state, "action", None),
        parameters=getattr(request.state, "parameters", None),
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies as validation errors."""
    logger.warning(f"Malformed request to {request.url.path}: {exc.errors()}")
    fields = ", ".join(
        ".".join(str(part) for part in error["loc"] if part != "body")
        for error in exc.errors()
    )

    # Echo whatever parts of the payload did parse
    raw = exc.body if isinstance(exc.body, dict) else {}
    action = raw.get("action", request.path_params.get("action_id"))
    parameters = raw.get("parameters", raw.get("input"))

    body = ErrorResponse(
        error=f"Invalid request body: {fields or 'body'}",
        error_type=ActionValidationError.error_type,
        status="failure",
        action=action if isinstance(action, str) else None,
        parameters=parameters if isinstance(parameters, dict) else None,
    )
    return JSONResponse(
        status_code=ActionValidationError.status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


def main() -> None:
    """Run the API with uvicorn."""
    uvicorn.run(
        "kubeactions.main:app",
        host=config.get("host"),
        port=config.get("port"),
        log_level=config.get("log_level").lower(),
        reload=config.get("debug"),
        log_config=get_logging_config(config.get("log_level"), api_config.base_path),
    )


if __name__ == "__main__":
    main()
