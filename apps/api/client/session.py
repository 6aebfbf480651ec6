"""Explicit signed-in user context handed to every component that acts for a user."""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class CurrentUser:
    user_id: str
    user_name: Optional[str] = None
    session_token: Optional[str] = None

    def auth_headers(self) -> Dict[str, str]:
        if not self.session_token:
            return {}
        return {"Authorization": f"Bearer {self.session_token}"}
