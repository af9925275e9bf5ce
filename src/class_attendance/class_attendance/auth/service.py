from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import AuthEvent
from ..core.exceptions import AuthenticationError, ValidationError
from ..logging_config import get_logger
from .model import User
from .repository import UserRepository

log = get_logger("auth")

AuthListener = Callable[[AuthEvent, str], None]


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: str
    email: str
    full_name: str


class AuthService:
    """Use cases: sign up, sign in, sign out, session lookup.

    Listeners registered with :meth:`on_auth_state_change` are told about every
    sign-in and sign-out, in registration order.
    """

    def __init__(self, users: UserRepository):
        self._users = users
        self._listeners: list[AuthListener] = []

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _emit(self, event: AuthEvent, user_id: str) -> None:
        for listener in list(self._listeners):
            listener(event, user_id)

    def sign_up(self, *, email: str, password: str, full_name: str = "") -> str:
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ValidationError("An account with this email already exists")

        user_id = str(uuid.uuid4())
        self._users.create_user(
            user_id=user_id,
            email=email,
            full_name=(full_name or "").strip() or None,
            password_hash=generate_password_hash(password),
        )
        log.info("account created", extra={"context": {"user_id": user_id}})
        return user_id

    def sign_in(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # unknown hash method, e.g. a placeholder value
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        self._emit(AuthEvent.SIGNED_IN, user.id)
        return SessionUser(user_id=user.id, email=user.email, full_name=user.display_name)

    def sign_out(self, user_id: Optional[str]) -> None:
        if user_id:
            self._emit(AuthEvent.SIGNED_OUT, user_id)

    def get_user(self, user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        return self._users.get_by_id(user_id)
