import logging
import threading
from typing import Dict, List, Optional

from fastapi import Request
from passlib.context import CryptContext

from errors import DuplicateUserError, PasswordMismatchError, UnknownUserError
from models import Score, User

logger = logging.getLogger(__name__)

PAGE_SIZE = 20


def make_pwd_context(rounds: int = 10) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


class UserStore:
    """Usuarios registrados, indexados por handle."""

    def __init__(self, pwd_context: CryptContext):
        self.pwd_context = pwd_context
        self._users: Dict[str, User] = {}
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._users)

    def __contains__(self, handle):
        return self.get(handle) is not None

    def get(self, handle: str) -> Optional[User]:
        with self._lock:
            return self._users.get(handle)

    def register(self, handle: str, password: str) -> bool:
        """Registra al usuario. Devuelve False si ya existía con la misma contraseña."""
        existing = self.get(handle)
        if existing is None:
            # bcrypt es lento a propósito, se hashea fuera del lock
            hashed = self.pwd_context.hash(password)
            with self._lock:
                existing = self._users.get(handle)
                if existing is None:
                    self._users[handle] = User(handle=handle, password_hash=hashed)
                    logger.info("Registered user %s", handle)
                    return True

        if self.pwd_context.verify(password, existing.password_hash):
            logger.info("User %s re-registered with matching credentials", handle)
            return False
        logger.info("Rejected registration for existing user %s", handle)
        raise DuplicateUserError(handle)

    def verify(self, handle: str, password: str) -> User:
        user = self.get(handle)
        if user is None:
            # Mismo costo que una contraseña incorrecta, el tiempo no delata al handle
            self.pwd_context.dummy_verify()
            raise UnknownUserError(handle)
        if not self.pwd_context.verify(password, user.password_hash):
            raise PasswordMismatchError(handle)
        return user


class ScoreLedger:
    """Puntajes enviados, ordenados de mayor a menor."""

    def __init__(self, page_size: int = PAGE_SIZE):
        self.page_size = page_size
        self._scores: List[Score] = []
        self._lock = threading.Lock()

    def __len__(self):
        with self._lock:
            return len(self._scores)

    def submit(self, score: Score) -> None:
        with self._lock:
            self._scores.append(score)
            # sort() es estable: los empates quedan en orden de envío
            self._scores.sort(key=lambda s: s.score, reverse=True)
        logger.info("Stored score %d for %s on level %s", score.score, score.user_handle, score.level)

    def query(self, level: str, page: int = 1) -> List[Score]:
        if page < 1:
            return []
        with self._lock:
            matching = [s for s in self._scores if s.level == level]
        matching.sort(key=lambda s: s.score, reverse=True)
        start = (page - 1) * self.page_size
        return matching[start:start + self.page_size]


# --- Dependencias ---
def get_users(request: Request) -> UserStore:
    return request.app.state.users


def get_ledger(request: Request) -> ScoreLedger:
    return request.app.state.ledger
