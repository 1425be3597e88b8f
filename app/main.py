"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.crud.category import CRUDCategory
from app.crud.task import CRUDTask
from app.dependencies import get_board
from app.integrations.apper import ApperClient
from app.logging_setup import setup_logging
from app.middleware.metrics import setup_metrics
from app.api.v1 import auth, categories, notifications, tasks
from app.services.auth_service import AuthSession
from app.services.board_service import TaskBoard
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def build_board(client: ApperClient, auth_session: AuthSession, notifier: NotificationService) -> TaskBoard:
    """Wire repositories and the board around one record store client."""
    board = TaskBoard(
        tasks_repo=CRUDTask(client, settings.TASKS_TABLE, page_size=settings.TASK_PAGE_SIZE),
        categories_repo=CRUDCategory(client, settings.CATEGORIES_TABLE, page_size=settings.CATEGORY_PAGE_SIZE),
        notifier=notifier,
        auth=auth_session,
    )
    auth_session.on_change(board.handle_auth_change)
    return board


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    client = getattr(app.state, "apper_client", None) or ApperClient()
    notifier = NotificationService()
    auth_session = AuthSession()
    app.state.apper_client = client
    app.state.notifier = notifier
    app.state.auth_session = auth_session
    app.state.board = build_board(client, auth_session, notifier)
    logger.info(f"{settings.APP_NAME} started with {client.mode.value} record store")
    yield
    # Shutdown
    await client.aclose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_metrics(app)

# Include routers
app.include_router(auth.router, prefix=f"{settings.API_V1_PREFIX}/auth", tags=["auth"])
app.include_router(tasks.router, prefix=f"{settings.API_V1_PREFIX}/tasks", tags=["tasks"])
app.include_router(
    categories.router, prefix=f"{settings.API_V1_PREFIX}/categories", tags=["categories"]
)
app.include_router(
    notifications.router,
    prefix=f"{settings.API_V1_PREFIX}/notifications",
    tags=["notifications"],
)


@app.get("/health")
async def health_check(board: TaskBoard = Depends(get_board)):
    """Health check endpoint."""
    return {
        "status": "ok",
        "checks": {
            "record_store": board.tasks_repo.client.mode.value,
            "tasks": board.tasks_state.value,
            "categories": board.categories_state.value,
        },
    }
