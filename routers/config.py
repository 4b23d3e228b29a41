from fastapi import APIRouter, Depends

from config.override import clear_override, resolve_database_url, save_override
from config.settings import settings
from database.db import store
from dependencies.security import require_admin
from schemas.common import fail, ok
from schemas.config import ConnectionOverride
from services.realtime import feed

router = APIRouter(prefix="/config", tags=["config"])


# ✅ [READ] which database is in use and what is configured
@router.get("/status")
def get_status():
    url, source = resolve_database_url()
    return ok({
        "dbStatus": store.status,
        "databaseSource": source,
        "databaseConfigured": bool(url),
        "supabaseConfigured": settings.SUPABASE_CONFIGURED,
        "geminiConfigured": bool(settings.GEMINI_API_KEY),
        "linearProgression": settings.LINEAR_PROGRESSION,
        "quizPassScore": settings.QUIZ_PASS_SCORE,
        "realtimeSubscribers": feed.subscriber_count,
    })


# ✅ [UPDATE] local override, takes precedence over the environment
@router.put("/connection", dependencies=[Depends(require_admin)])
def set_connection(payload: ConnectionOverride):
    try:
        url = save_override(payload.database_url)
    except ValueError:
        return fail(400, "URL de base de données invalide")
    status = store.reconnect(url)
    message = "Connecté à la base cloud" if status == "connected" else "Base injoignable, mode local actif"
    return ok({"dbStatus": status, "databaseSource": "override"}, message)


# ✅ [DELETE] back to the environment configuration
@router.delete("/connection", dependencies=[Depends(require_admin)])
def remove_connection():
    clear_override()
    url, source = resolve_database_url()
    status = store.reconnect(url)
    return ok({"dbStatus": status, "databaseSource": source}, "Configuration locale supprimée")
