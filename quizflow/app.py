"""Main FastAPI application with modularized routes."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from quizflow.config import STATIC_DIR
from quizflow.database import init_db
from quizflow.errors import BackendError, QuizFlowError
from quizflow.logging_setup import setup_console_logging
from quizflow.routes import auth, completion_pages, editor, quizzes, runs
from quizflow.services.cleanup_service import schedule_cleanup
from quizflow.services.editor_service import DraftStore

setup_console_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="QuizFlow API")
app.state.drafts = DraftStore()

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error mapping
@app.exception_handler(QuizFlowError)
async def quizflow_error_handler(request: Request, exc: QuizFlowError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    error = BackendError("Storage is unavailable")
    return JSONResponse(status_code=error.status_code, content={"detail": error.message})


# Startup events
@app.on_event("startup")
def startup_events() -> None:
    """Initialize database and schedule cleanup tasks on startup."""
    init_db()
    schedule_cleanup(app.state.drafts)


# Root endpoint
@app.get("/", response_model=None)
def index() -> FileResponse | dict[str, str]:
    """Serve frontend index.html when one is bundled."""
    index_path = STATIC_DIR / "index.html"
    if not index_path.exists():
        return {"message": "QuizFlow API", "docs": "/docs"}
    return FileResponse(index_path)


# Mount static files
if STATIC_DIR.is_dir():
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# Include routers
app.include_router(auth.router)
app.include_router(quizzes.router)
app.include_router(editor.router)
app.include_router(completion_pages.router)
app.include_router(runs.router)
app.include_router(runs.public_router)
