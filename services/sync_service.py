"""
Record-level sync helpers shared by every router.

- to_record(): ORM row -> dict keyed by the SQL (camelCase) column names
- upsert_records(): diff-based upsert, last write wins, nothing deleted
- publish_upsert() / delete_records(): hand written rows to the realtime feed
- push_all(): copy local-mode data to the cloud database
"""

import logging
from typing import Any, Dict, Iterable, List, Type

from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.db import DataStore, probe
from models.classes import ClassLevel
from models.instructors import Instructor
from models.messages import Message
from models.progress import Progress
from models.sessions import Session as SessionModel
from models.students import Student
from services.errors import ServiceError
from services.realtime import feed

logger = logging.getLogger(__name__)

# parents before children so foreign keys resolve on the cloud side
SYNC_ORDER = [ClassLevel, Instructor, Student, SessionModel, Progress, Message]


class SyncError(ServiceError):
    status_code = 503


def _columns(model) -> List[tuple]:
    """(python attribute, SQL column name) pairs"""
    return [(attr.key, attr.columns[0].name) for attr in inspect(model).mapper.column_attrs]


def to_record(obj) -> Dict[str, Any]:
    return {column: getattr(obj, key) for key, column in _columns(type(obj))}


def _attributes(obj) -> Dict[str, Any]:
    return {key: getattr(obj, key) for key, _ in _columns(type(obj))}


def record_key(obj) -> str:
    mapper = inspect(type(obj))
    return ":".join(str(getattr(obj, mapper.get_property_by_column(col).key)) for col in mapper.primary_key)


# ==========================================================
# [1] realtime hand-off
# ==========================================================
def publish_upsert(obj) -> bool:
    return feed.publish(type(obj).__tablename__, record_key(obj), to_record(obj))


def delete_records(db: Session, rows: List):
    """Delete, commit, then announce; rows are snapshotted first because they expire on commit."""
    snapshots = [(type(row).__tablename__, record_key(row), to_record(row)) for row in rows]
    db.flush()
    # one flush per row keeps children ahead of their parents
    for row in rows:
        db.delete(row)
        db.flush()
    db.commit()
    for table, key, record in snapshots:
        feed.publish(table, key, record, event_type="DELETE")


# ==========================================================
# [2] diff-based upsert
# ==========================================================
def upsert_records(db: Session, model: Type, records: Iterable[Dict[str, Any]]) -> List:
    """
    records: dicts keyed by python attribute names (schema.model_dump()).
    Only new or modified rows are merged; returns those rows.
    """
    mapper = inspect(model)
    keys = [key for key, _ in _columns(model)]
    pk_keys = [mapper.get_property_by_column(col).key for col in mapper.primary_key]
    changed = []

    for record in records:
        values = {k: record.get(k) for k in keys if k in record}
        identity = tuple(values.get(k) for k in pk_keys)
        existing = db.get(model, identity if len(identity) > 1 else identity[0])
        if existing is not None:
            current = _attributes(existing)
            if all(current.get(k) == v for k, v in values.items()):
                continue
            for k, v in values.items():
                setattr(existing, k, v)
            changed.append(existing)
        else:
            obj = model(**values)
            db.add(obj)
            changed.append(obj)

    db.commit()
    for obj in changed:
        db.refresh(obj)
        publish_upsert(obj)
    logger.info(f"Upserted {len(changed)} {model.__tablename__} record(s)")
    return changed


# ==========================================================
# [3] manual reconciliation: local -> cloud
# ==========================================================
def push_all(store: DataStore) -> Dict[str, int]:
    """Only from local mode; the local copy is dropped once the cloud holds it."""
    if store.status == "connected":
        raise SyncError("Déjà connecté au cloud : aucune donnée locale à envoyer.")
    if not store.cloud_url:
        raise SyncError("Aucune base de données cloud n'est configurée.")
    if not probe(store.ensure_cloud_engine()):
        raise SyncError("La base de données cloud est injoignable.")
    if store.local_engine is None:
        # nothing was ever written locally
        return {model.__tablename__: 0 for model in SYNC_ORDER}

    counts: Dict[str, int] = {}
    local = store.local_session()
    cloud = store.cloud_session()
    try:
        for model in SYNC_ORDER:
            rows = local.execute(select(model)).scalars().all()
            for row in rows:
                cloud.merge(model(**_attributes(row)))
            cloud.flush()
            counts[model.__tablename__] = len(rows)
        cloud.commit()
    except SQLAlchemyError as e:
        cloud.rollback()
        logger.error(f"Push to cloud failed: {e}")
        raise SyncError(f"Échec de la synchronisation : {e}") from e
    finally:
        local.close()
        cloud.close()

    # stale local rows must never be pushed over newer cloud rows
    store.local_engine.dispose()
    store.local_engine = None
    store.reconnect(store.cloud_url)
    logger.info(f"Pushed local data to cloud: {counts}")
    return counts
