"""
Login: a linear credential match against instructors (then the built-in
admin account), then students. Tokens live in memory and expire after
TOKEN_TTL_HOURS.
"""

import hmac
import logging
import secrets
import threading
import time
from typing import Dict, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from config.settings import settings
from models.instructors import Instructor
from schemas.auth import CurrentUser
from services.student_service import ADMIN_ID, find_by_full_name, student_password_matches

logger = logging.getLogger(__name__)


def _same(a: Optional[str], b: Optional[str]) -> bool:
    if a is None or b is None:
        return False
    return hmac.compare_digest(a.encode(), b.encode())


class TokenRegistry:
    """Bearer tokens kept in memory; expired tokens are pruned whenever a new one is issued."""

    def __init__(self, ttl_seconds: Optional[float] = None):
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.TOKEN_TTL_HOURS * 3600
        self._lock = threading.Lock()
        self._tokens: Dict[str, Tuple[CurrentUser, float]] = {}

    def _expired(self, issued_at: float, now: float) -> bool:
        return now - issued_at >= self.ttl_seconds

    def issue(self, user: CurrentUser) -> str:
        token = secrets.token_urlsafe(32)
        now = time.monotonic()
        with self._lock:
            for stale in [t for t, (_, issued_at) in self._tokens.items() if self._expired(issued_at, now)]:
                del self._tokens[stale]
            self._tokens[token] = (user, now)
        return token

    def resolve(self, token: str) -> Optional[CurrentUser]:
        with self._lock:
            entry = self._tokens.get(token)
            if entry is None:
                return None
            user, issued_at = entry
            if self._expired(issued_at, time.monotonic()):
                del self._tokens[token]
                return None
            return user

    def revoke(self, token: str) -> bool:
        with self._lock:
            return self._tokens.pop(token, None) is not None

    def revoke_user(self, user_id: str) -> int:
        with self._lock:
            stale = [t for t, (u, _) in self._tokens.items() if u.id == user_id]
            for token in stale:
                del self._tokens[token]
            return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)


tokens = TokenRegistry()


def authenticate(db: Session, username: str, password: str) -> Optional[CurrentUser]:
    username = username.strip()

    # 1) instructors
    for instructor in db.execute(select(Instructor)).scalars():
        if instructor.username == username and _same(password, instructor.password):
            return CurrentUser(type="admin", id=instructor.id, name=instructor.full_name)

    # 2) built-in administrator
    if _same(username, settings.ADMIN_USERNAME) and _same(password, settings.ADMIN_PASSWORD):
        return CurrentUser(type="admin", id=ADMIN_ID, name="Administrateur")

    # 3) students log in with their full name
    student = find_by_full_name(db, username)
    if student is not None and student_password_matches(student, password):
        return CurrentUser(type="student", id=student.id, name=student.full_name)

    logger.info(f"Failed login for {username!r}")
    return None
