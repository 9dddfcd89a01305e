import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text
from sqlmodel import Session
from starlette.middleware.base import BaseHTTPMiddleware

from api.config import settings
from api.db.session import get_session, init_db
from api.errors import api_response, error_response, register_exception_handlers
from api.auth.routing import router as auth_router
from api.videos.routing import router as videos_router
from api.comments.routing import router as comments_router
from api.likes.routing import router as likes_router
from api.tweets.routing import router as tweets_router
from api.playlists.routing import router as playlists_router
from api.subscriptions.routing import router as subscriptions_router
from api.dashboard.routing import router as dashboard_router

# Logging
_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(
    level=_level,
    format='%(asctime)s %(levelname)s %(name)s %(message)s',
)
for _logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(_logger_name).setLevel(_level)

logger = logging.getLogger("videotube")

# CORS
# Use env-driven origins with safe local defaults from settings
origins = [origin for origin in settings.CORS_ORIGINS if origin]


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("VideoTube API ready")
    yield


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED,
)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request and turns any error that escapes the routers into a 500 envelope."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"Request failed: {request.method} {request.url.path}")
            response = error_response(500, "Internal server error")

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({process_time:.3f}s)"
        )
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        response.headers["X-API-Version"] = app.version
        return response


app = FastAPI(
    title="VideoTube API",
    description=(
        "VideoTube is a video-sharing backend: videos, comments, likes, tweets, "
        "playlists, channel subscriptions and channel statistics. "
        "It is built with FastAPI and SQLModel.\n\n"
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.state.limiter = limiter
register_exception_handlers(app)

app.add_middleware(SlowAPIMiddleware)
app.add_middleware(LoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Prometheus metrics
Instrumentator().instrument(app).expose(app, endpoint="/metrics")

app.include_router(auth_router, prefix='/api/auth')
app.include_router(videos_router, prefix='/api/videos', tags=["videos"])
app.include_router(comments_router, prefix='/api/comments', tags=["comments"])
app.include_router(likes_router, prefix='/api/likes', tags=["likes"])
app.include_router(tweets_router, prefix='/api/tweets', tags=["tweets"])
app.include_router(playlists_router, prefix='/api/playlists', tags=["playlists"])
app.include_router(subscriptions_router, prefix='/api/subscriptions', tags=["subscriptions"])
app.include_router(dashboard_router, prefix='/api/dashboard', tags=["dashboard"])


@app.get("/")
def read_root():
    return RedirectResponse(url=app.docs_url, status_code=302)


@app.get("/api/healthcheck", tags=["healthcheck"])
def healthcheck(db_session: Session = Depends(get_session)):
    db_session.connection().execute(text("SELECT 1"))
    return api_response({"database": "ok"}, "Service is running smoothly")
