"""
Login credential verification

The gateway has no user database; logins are checked against a single test
account supplied through configuration.
"""

import secrets
from dataclasses import dataclass
from typing import Optional

import structlog

from gateway.config import Settings
from gateway.models.auth import LoginUser

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LoginAccount:
    user_id: str
    email: str
    password: Optional[str]
    first_name: str
    last_name: str


class CredentialVerifier:
    """Checks email/password pairs against the configured test account"""

    def __init__(self, account: LoginAccount):
        self.account = account
        if not account.password:
            logger.warning("No test account password configured, all logins will be rejected")

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialVerifier":
        password = settings.test_user_password.get_secret_value() if settings.test_user_password else None
        return cls(LoginAccount(
            user_id=settings.test_user_id,
            email=settings.test_user_email,
            password=password,
            first_name=settings.test_user_first_name,
            last_name=settings.test_user_last_name,
        ))

    def verify(self, email: Optional[str], password: Optional[str]) -> Optional[LoginUser]:
        """Return the account's user when the pair matches, otherwise None"""
        if not email or not password or not self.account.password:
            return None

        email_ok = secrets.compare_digest(email.encode(), self.account.email.encode())
        password_ok = secrets.compare_digest(password.encode(), self.account.password.encode())
        if not (email_ok and password_ok):
            return None

        return LoginUser(
            id=self.account.user_id,
            email=self.account.email,
            firstName=self.account.first_name,
            lastName=self.account.last_name,
        )

    @staticmethod
    def generate_session_token() -> str:
        return f"mock_jwt_token_{secrets.token_urlsafe(24)}"
