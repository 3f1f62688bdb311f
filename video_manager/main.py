from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from video_manager import database
from video_manager.config import get_settings
from video_manager.errors import ActionError
from video_manager.routers import api, auth, public

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the database and bring the schema up to date on startup."""
    settings = get_settings()
    logging.basicConfig(format=LOG_FORMAT, level=settings.log_level)

    await database.init_db(settings.database_url)
    if database.is_configured() and settings.auto_migrate:
        from video_manager.migrations import run_migrations
        await run_migrations()

    yield

    await database.dispose_db()


app = FastAPI(
    title="Video Manager API",
    description="Bookmarks for videos and links, organised in categories",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["POST", "OPTIONS", "GET"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    return JSONResponse(status_code=400, content={"error": first.get("msg", "Invalid request")})


@app.exception_handler(ActionError)
async def action_error(request: Request, exc: ActionError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.get("/health")
async def health_check():
    return {"status": "healthy", "database": database.is_configured()}


# Register routers
app.include_router(api.router)
app.include_router(auth.router)
app.include_router(public.router)
