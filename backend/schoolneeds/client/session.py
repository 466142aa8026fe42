"""
سياق الجلسة - هوية المستخدم ودوره، يُمرَّر صراحة لمن يحتاجه
"""
import logging
from typing import Callable, List, Optional

from schoolneeds.core.constants import UserRole
from schoolneeds.schemas.auth import UserResponse

logger = logging.getLogger(__name__)

Listener = Callable[["AuthContext"], None]


class AuthContext:
    """
    Holds the bearer token and the signed-in user.

    Populated on sign-in or session restore, cleared on sign-out; listeners
    registered with ``on_change`` are called after every transition.
    """

    def __init__(self):
        self.token: Optional[str] = None
        self.user: Optional[UserResponse] = None
        self._listeners: List[Listener] = []

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    @property
    def role(self) -> Optional[UserRole]:
        return self.user.role if self.user else None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_principal(self) -> bool:
        return self.role == UserRole.PRINCIPAL

    def populate(self, token: str, user: UserResponse) -> None:
        self.token = token
        self.user = user
        self._notify()

    def clear(self) -> None:
        if self.token is None and self.user is None:
            return
        self.token = None
        self.user = None
        self._notify()

    def on_change(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Auth state listener failed")
