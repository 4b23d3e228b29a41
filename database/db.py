"""
database/db.py

- Declarative Base shared by every model.
- DataStore: picks the engine requests run against.
  * cloud: the Supabase PostgreSQL database, when a URL is configured and the probe succeeds
  * local: an in-memory SQLite database filled with seed data (offline / demo mode)
- get_db(): FastAPI dependency yielding a session bound to the active engine.
"""

import logging
from typing import Literal, Optional

from sqlalchemy import create_engine, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from config.settings import settings

logger = logging.getLogger(__name__)

# ✅ Base class every model inherits from (declarative style)
Base = declarative_base()

DbStatus = Literal["loading", "connected", "error"]


def init_models():
    """Import every model module so its table is registered on Base.metadata."""
    import models.classes       # noqa: F401
    import models.students      # noqa: F401
    import models.sessions      # noqa: F401
    import models.progress      # noqa: F401
    import models.messages      # noqa: F401
    import models.instructors   # noqa: F401


def _create_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        url,
        pool_pre_ping=True,
        connect_args={"connect_timeout": settings.DB_CONNECT_TIMEOUT},
    )


class DataStore:
    def __init__(self, cloud_url: Optional[str] = None, seed: bool = True):
        self.cloud_url = cloud_url
        self.seed = seed
        self.status: DbStatus = "loading"
        self.cloud_engine: Optional[Engine] = None
        self.local_engine: Optional[Engine] = None
        self._factory: Optional[sessionmaker] = None

    # ==========================================================
    # [1] engine selection
    # ==========================================================
    @property
    def active_engine(self) -> Engine:
        if self.status == "connected" and self.cloud_engine is not None:
            return self.cloud_engine
        return self._local()

    @property
    def is_cloud(self) -> bool:
        return self.status == "connected"

    def connect(self) -> DbStatus:
        """Probe the cloud database; fall back to local mode when it is missing or unreachable."""
        init_models()
        if not self.cloud_url:
            logger.warning("No cloud database configured, running in local mode")
            self._use_local()
            return self.status

        if probe(self.ensure_cloud_engine()):
            self.status = "connected"
            self._factory = sessionmaker(autocommit=False, autoflush=False, bind=self.cloud_engine)
            logger.info("Cloud database connected")
        else:
            logger.warning("Cloud database unreachable, running in local mode")
            self._use_local()
        return self.status

    def reconnect(self, cloud_url: Optional[str]) -> DbStatus:
        if self.cloud_engine is not None:
            self.cloud_engine.dispose()
            self.cloud_engine = None
        self.cloud_url = cloud_url
        self.status = "loading"
        return self.connect()

    def _use_local(self):
        self.status = "error"
        self._factory = sessionmaker(autocommit=False, autoflush=False, bind=self._local())

    def _local(self) -> Engine:
        if self.local_engine is None:
            init_models()
            self.local_engine = _create_engine("sqlite://")
            Base.metadata.create_all(self.local_engine)
            if self.seed:
                from database.seed import seed_local_data

                factory = sessionmaker(bind=self.local_engine)
                with factory() as db:
                    seed_local_data(db)
        return self.local_engine

    # ==========================================================
    # [2] sessions
    # ==========================================================
    def session(self):
        if self._factory is None:
            self.connect()
        return self._factory()

    def ensure_cloud_engine(self) -> Engine:
        if self.cloud_engine is None:
            self.cloud_engine = _create_engine(self.cloud_url)
        return self.cloud_engine

    # push-all reads local rows and writes cloud rows whatever the current status
    def cloud_session(self):
        return sessionmaker(autocommit=False, autoflush=False, bind=self.ensure_cloud_engine())()

    def local_session(self):
        return sessionmaker(autocommit=False, autoflush=False, bind=self._local())()


def probe(engine: Engine) -> bool:
    """Create missing tables, then read one row from classes."""
    from models.classes import ClassLevel

    try:
        Base.metadata.create_all(engine)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            conn.execute(select(ClassLevel.id).limit(1))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database probe failed: {e}")
        return False


# ✅ process-wide store, configured at startup (main.py)
store = DataStore(seed=settings.SEED_LOCAL_DATA)


def get_db():
    db = store.session()
    try:
        yield db
    finally:
        db.close()
