import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from zdock_api.api import containers, networks, system
from zdock_api.core.config import Settings
from zdock_api.core.logging import configure_logging
from zdock_api.domain.errors import ZDockError
from zdock_api.schemas.common import ErrorResponse
from zdock_api.repositories.container_record_repository import FileContainerRecordRepository
from zdock_api.services.command_runner import SubprocessCommandRunner
from zdock_api.services.container_directory import ContainerDirectory
from zdock_api.services.container_service import ContainerService
from zdock_api.services.liveness import ProcessLivenessProbe
from zdock_api.services.reconciler import StateReconciler
from zdock_api.services.runtime_proxy import RuntimeCommandProxy
from zdock_api.services.system_service import SystemService

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Bodies produced by the exception handlers below
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    404: {"model": ErrorResponse, "description": "Container not found"},
    500: {"model": ErrorResponse, "description": "Runtime or state directory failure"},
    504: {"model": ErrorResponse, "description": "Runtime timed out"},
}


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL)

    store = FileContainerRecordRepository(settings.CONTAINER_STATE_DIR, settings.CONFIG_FILE_NAME)
    directory = ContainerDirectory(store, StateReconciler(store, ProcessLivenessProbe()))
    runner = SubprocessCommandRunner(settings.RUNTIME_BINARY, timeout=settings.COMMAND_TIMEOUT_SECONDS)
    runtime = RuntimeCommandProxy(
        runner,
        directory,
        create_timeout=settings.CREATE_POLL_TIMEOUT_SECONDS,
        create_poll_interval=settings.CREATE_POLL_INTERVAL_SECONDS,
        name_marker=settings.CREATE_NAME_MARKER,
    )

    app = FastAPI(title="zdock – Container Control Plane")
    app.state.settings = settings
    app.state.directory = directory
    app.state.runtime = runtime
    app.state.container_service = ContainerService(directory, runtime)
    app.state.system_service = SystemService(runtime, settings.ZDOCKER_ROOT, settings.MEMINFO_PATH)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("%s %s -> %d (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    @app.exception_handler(ZDockError)
    async def zdock_error_handler(request: Request, exc: ZDockError):
        if exc.status_code >= 500:
            logger.error("[API] %s %s failed: %s", request.method, request.url.path, exc)
        body = ErrorResponse(error=exc.message, output=exc.output)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        body = ErrorResponse(error=f"Invalid request: {problems}")
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    for router in (containers.router, networks.router, system.router):
        app.include_router(router, prefix=API_PREFIX, responses=ERROR_RESPONSES)

    # ---------- Startup / Shutdown ----------

    @app.on_event("startup")
    async def startup_event():
        logger.info("[STARTUP] Container state in %s, runtime %s", settings.CONTAINER_STATE_DIR, settings.RUNTIME_BINARY)
        if settings.RECONCILE_INTERVAL_SECONDS > 0:
            directory.start_reconciliation_loop(settings.RECONCILE_INTERVAL_SECONDS)

    @app.on_event("shutdown")
    async def shutdown_event():
        await directory.stop_reconciliation_loop()
        logger.info("[SHUTDOWN] Reconciliation stopped")

    return app


app = create_app()


def run():
    import uvicorn

    settings = app.state.settings
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
