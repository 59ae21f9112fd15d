"""FastAPI application setup"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.api.models import ErrorResponse
from src.api.routes import router
from src.api.middleware import setup_cors, setup_rate_limiting
from src.db.connection import Database
from src.exceptions import PizzaAppError, ValidationError
from src.services.container import init_container, reset_container
from src.services.place_search import OverpassClient
from src.config import LOG_LEVEL

# Configure logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, LOG_LEVEL, logging.INFO)
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for FastAPI application"""
    # Startup
    logger.info("Starting API server...")
    db = Database()
    await db.init_pool()
    logger.info("Database pool initialized")

    init_container(db=db, place_search=OverpassClient())

    yield

    # Shutdown
    logger.info("Shutting down API server...")
    reset_container()
    await db.close_pool()
    logger.info("Database pool closed")


def create_api_application() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Pizza Finder API",
        description="REST API for pizzeria discovery, dual ratings and achievements",
        version="1.0.0",
        lifespan=lifespan
    )

    # Setup middleware
    setup_cors(app)
    setup_rate_limiting(app)

    # Include routes
    app.include_router(router)

    @app.exception_handler(PizzaAppError)
    async def app_error_handler(request, exc: PizzaAppError):
        body = ErrorResponse(error=exc.user_message, detail=exc.message, request_id=exc.request_id)
        return JSONResponse(
            status_code=400 if isinstance(exc, ValidationError) else 500,
            content=body.model_dump(mode="json")
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error", detail=str(exc)).model_dump(mode="json")
        )

    logger.info("FastAPI application created")

    return app


app = create_api_application()
