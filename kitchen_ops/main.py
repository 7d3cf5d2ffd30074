"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, WebSocket, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kitchen_ops.api.routes import router
from kitchen_ops.api.websocket import handle_queue_feed
from kitchen_ops.config import get_settings
from kitchen_ops.services.container import ServiceContainer, build_container
from kitchen_ops.state import PersistenceError
from kitchen_ops.utils.logging import get_logger, setup_logging

# Setup logging first
setup_logging()
logger = get_logger(__name__)


def create_app(container: ServiceContainer | None = None) -> FastAPI:
    """Build the application, optionally around pre-built services."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager."""
        # Startup
        logger.info("application_starting")

        services = container or build_container(get_settings())
        await services.start()
        app.state.container = services
        logger.info("services_initialized")

        yield

        # Shutdown
        logger.info("application_shutting_down")
        await services.stop()
        app.state.container = None

    app = FastAPI(
        title="Kitchen Ops",
        description="Order queue, inventory deduction and stock reporting for a pizzeria",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("request_persistence_failed", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Storage backend unavailable"},
        )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "kitchen-ops"}

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": "Kitchen Ops API",
            "docs": "/docs",
            "health": "/health",
        }

    app.include_router(router, prefix="/api/v1", tags=["api"])

    # WebSocket endpoint
    @app.websocket("/ws/queue")
    async def queue_websocket(websocket: WebSocket) -> None:
        """Live queue overview updates."""
        services = getattr(websocket.app.state, "container", None)
        if services is None:
            await websocket.close(code=1011, reason="Services are not running")
            return
        await handle_queue_feed(websocket, services.queue)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "kitchen_ops.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.environment == "development",
    )
