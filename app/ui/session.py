"""
UI session management.

Handles signed session cookies for the staff dashboard and the JSON API.
"""

from typing import Optional
from uuid import UUID

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from app.core.config import Settings


class SessionManager:
    """Manages signed session cookies for staff authentication."""

    def __init__(self, secret_key: str, max_age: int, cookie_name: str = "session"):
        self.serializer = URLSafeTimedSerializer(secret_key, salt="staff-session")
        self.max_age = max_age
        self.cookie_name = cookie_name

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionManager":
        return cls(
            settings.SECRET_KEY,
            settings.SESSION_MAX_AGE_SECONDS,
            settings.SESSION_COOKIE_NAME,
        )

    def create_session_token(self, user_id: UUID, email: str) -> str:
        """
        Create a signed session token.

        Args:
            user_id: User UUID
            email: User email

        Returns:
            Signed token string
        """
        data = {
            "user_id": str(user_id),
            "email": email,
        }
        return self.serializer.dumps(data)

    def verify_session_token(self, token: str) -> Optional[dict]:
        """
        Verify and decode a session token.

        Returns:
            Dict with user_id and email if valid, None otherwise
        """
        try:
            return self.serializer.loads(token, max_age=self.max_age)
        except (BadSignature, SignatureExpired):
            return None
