from fastapi import APIRouter, Depends

from database.db import store
from dependencies.security import require_admin
from schemas.common import ok
from services.sync_service import push_all

router = APIRouter(prefix="/sync", tags=["sync"], dependencies=[Depends(require_admin)])


@router.get("/status")
def sync_status():
    return ok({
        "dbStatus": store.status,
        "cloudConfigured": bool(store.cloud_url),
        "localData": store.local_engine is not None,
    })


# ✅ [PUSH] local-mode data -> cloud, then switch to the cloud
@router.post("/push-all")
def push_local_data():
    counts = push_all(store)
    return ok({"counts": counts, "dbStatus": store.status}, "Données locales envoyées vers le cloud")
