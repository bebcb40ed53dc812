"""
Persisted login for the CrownSide client.

The session lives in a small JSON file ({"user": ..., "token": ...}) so a
restarted client picks up where it left off. It is passed explicitly to the
client rather than read from a global.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from app.core.config import settings

logger = logging.getLogger(__name__)


class Session:
    def __init__(self, path: Optional[str] = None):
        self.path = path or settings.SESSION_FILE
        self.user: Optional[Dict[str, Any]] = None
        self.token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def auth_headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def load(self) -> "Session":
        """Restore user and token from disk; a missing or corrupt file means logged out."""
        if not os.path.exists(self.path):
            return self
        try:
            with open(self.path, "r", encoding="utf-8") as session_file:
                data = json.load(session_file)
        except (OSError, ValueError) as load_error:
            logger.warning(f"Ignoring unreadable session file {self.path}: {load_error}")
            return self

        self.user = data.get("user")
        self.token = data.get("token")
        return self

    def login(self, user: Dict[str, Any], token: str) -> None:
        self.user = user
        self.token = token
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as session_file:
            json.dump({"user": user, "token": token}, session_file)
        logger.info(f"Session saved for {user.get('email')}")

    def logout(self) -> None:
        self.user = None
        self.token = None
        if os.path.exists(self.path):
            os.remove(self.path)
