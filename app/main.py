from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.dependencies.services import get_pos_client_cached
from app.health import router as health_router
from app.mcp_server import mcp
from app.mock_data_view import router as mock_data_router
from app.tools.billing import router as billing_router
from app.tools.menu import router as menu_router
from app.tools.reports import router as reports_router


def configure_logging() -> None:
    """Ensure application logs use the INFO level by default."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
    else:
        root_logger.setLevel(logging.INFO)

configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    settings_snapshot = settings.model_dump(exclude={"pos_api_token"})
    logger.info("Application settings on startup: %s", settings_snapshot)

    client = get_pos_client_cached()
    logger.info("Application startup complete (mock data: %s).", client.use_mock_data)

    try:
        async with mcp.session_manager.run():
            yield
    finally:
        logger.info("Closing POS API client connection.")
        await client.close()
        logger.info("Application shutdown complete.")


settings = get_settings()
app = FastAPI(
    title=settings.app_name,
    lifespan=lifespan,
    redirect_slashes=False,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin).rstrip("/") for origin in settings.cors_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(reports_router, prefix="/tools/reports")
app.include_router(billing_router, prefix="/tools/billing")
app.include_router(menu_router, prefix="/tools/menu")
app.include_router(health_router)
app.include_router(mock_data_router)

# MCP Streamable HTTP server; its session manager runs inside lifespan()
app.mount("/mcp", mcp.streamable_http_app())
