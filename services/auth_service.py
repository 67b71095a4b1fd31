# -*- coding: utf-8 -*-
"""
Authentication service.

Operators sign in with a plain username; the backend knows them by a
virtual e-mail address on the system domain.
"""

from typing import Any, Dict, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from app.config import Config
from models.user import User
from services.api_client import RemoteApiClient
from services.exceptions import ApiException, NetworkException, ValidationError
from services.translation_manager import tr
from utils.logger import get_logger

logger = get_logger(__name__)


def username_to_email(identifier: str) -> str:
    """'Ahmad ' -> 'ahmad@system.local'; real addresses pass through."""
    text = (identifier or "").strip()
    if "@" in text:
        return text
    return f"{text.lower()}@{Config.SYSTEM_EMAIL_DOMAIN}"


def email_to_username(email: str) -> str:
    suffix = f"@{Config.SYSTEM_EMAIL_DOMAIN}"
    if email and email.endswith(suffix):
        return email[:-len(suffix)]
    return email or ""


def user_from_payload(payload: Dict[str, Any], access_token: str = None) -> User:
    """Build a User from the backend's user object."""
    metadata = payload.get("user_metadata") or {}
    email = payload.get("email") or ""
    return User(
        user_id=payload.get("id") or "",
        username=metadata.get("username") or email_to_username(email),
        email=email,
        full_name=metadata.get("fullName") or metadata.get("full_name") or "",
        role=metadata.get("role") or "data_entry",
        assigned_camps=list(metadata.get("assigned_camps") or []),
        access_token=access_token,
    )


class AuthService(QObject):
    """
    Session handling against the backend's auth endpoints.

    Signals:
        session_changed(object): the signed-in User, or None after sign-out
    """

    session_changed = pyqtSignal(object)

    def __init__(self, client: RemoteApiClient, parent=None):
        super().__init__(parent)
        self.client = client
        self._user: Optional[User] = None

    @property
    def user(self) -> Optional[User]:
        return self._user

    def sign_in(self, identifier: str, password: str) -> User:
        """
        Raises:
            ValidationError: missing or wrong credentials.
            NetworkException: the backend is unreachable.
        """
        if not identifier or not identifier.strip() or not password:
            raise ValidationError(tr("auth.credentials_required"))

        email = username_to_email(identifier)
        try:
            data = self.client.sign_in(email, password)
        except ApiException as e:
            logger.warning(f"Sign-in rejected for {email}: {e}")
            raise ValidationError(tr("auth.invalid_credentials"))

        self._user = user_from_payload(data.get("user") or {}, data.get("access_token"))
        logger.info(f"User signed in: {self._user.username} ({self._user.role})")
        self.session_changed.emit(self._user)
        return self._user

    def sign_out(self):
        try:
            self.client.sign_out()
        except NetworkException as e:
            logger.warning(f"Sign-out could not reach the backend: {e}")
        except ApiException as e:
            logger.warning(f"Sign-out rejected by the backend: {e}")
        self._user = None
        logger.info("User signed out")
        self.session_changed.emit(None)

    def current_user(self, access_token: str = None) -> Optional[User]:
        """
        Verify a session token against the backend.

        Returns the User, or None when the token is missing or invalid.

        Raises:
            NetworkException: the backend is unreachable (nothing is known).
        """
        token = access_token or self.client.access_token
        if not token:
            return None
        self.client.set_access_token(token)
        try:
            payload = self.client.get_user()
        except ApiException as e:
            logger.warning(f"Stored session is no longer valid: {e}")
            self.client.set_access_token(None)
            self._user = None
            return None

        self._user = user_from_payload(payload or {}, token)
        return self._user
