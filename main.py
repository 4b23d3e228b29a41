from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
# HTTP library debug logs off
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

# ✅ middlewares
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ routers
from routers import (
    auth, classes, students, sessions, tracking, messages,
    portal, instructors,
    ai,  # ← Gemini content / quiz generation
    sync, realtime, config, docs,
)

from config.override import resolve_database_url
from database.db import store

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# ✅ CORS (front end on Vite / Next.js)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ request latency (X-Latency-Ms response header)
app.add_middleware(TimingMiddleware)

# ✅ global error handlers (consistent JSON error envelope)
add_error_handlers(app)

# ✅ routers under /v1
app.include_router(auth.router,        prefix="/v1")
app.include_router(classes.router,     prefix="/v1")
app.include_router(students.router,    prefix="/v1")
app.include_router(sessions.router,    prefix="/v1")
app.include_router(tracking.router,    prefix="/v1")
app.include_router(messages.router,    prefix="/v1")
app.include_router(portal.router,      prefix="/v1")
app.include_router(instructors.router, prefix="/v1")
app.include_router(ai.router,          prefix="/v1")
app.include_router(sync.router,        prefix="/v1")
app.include_router(realtime.router,    prefix="/v1")
app.include_router(config.router,      prefix="/v1")
app.include_router(docs.router,        prefix="/v1")


# ✅ health check
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running", "dbStatus": store.status}


@app.on_event("startup")
def _connect_database():
    # an unreachable database leaves the app in local mode
    url, source = resolve_database_url()
    status = store.reconnect(url)
    logger.info(f"Database status at startup: {status} (source: {source})")


# ✅ root
@app.get("/")
def root():
    return {"message": "e-CP MJA API - classe progressive des clubs Aventuriers et Explorateurs"}
