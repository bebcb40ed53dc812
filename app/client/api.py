import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import httpx

from app.client.errors import ApiError
from app.client.session import Session
from app.core.config import settings

logger = logging.getLogger(__name__)


class CrownSideClient:
    """Async client for the CrownSide REST API.

    Use it as an async context manager: entering loads the session from
    disk, leaving closes the HTTP connection pool. Every request carries the
    bearer token the session holds at that moment.
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.session = session or Session()
        self.http = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "CrownSideClient":
        self.session.load()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    async def request(self, method: str, path: str, **kwargs) -> Any:
        headers = {**kwargs.pop("headers", {}), **self.session.auth_headers}
        response = await self.http.request(method, path, headers=headers, **kwargs)

        if not response.is_success:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = response.text
            logger.error(f"{method} {path} failed: {response.status_code} {detail}")
            if response.status_code == 401 and self.session.is_authenticated:
                # The stored token is no longer accepted
                self.session.logout()
            raise ApiError(response.status_code, detail)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Auth

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self.request("POST", "/auth/login", json={"email": email, "password": password})
        self.session.login(data["user"], data["access_token"])
        return data["user"]

    async def register(self, email: str, password: str, full_name: str, role: str = "CLIENT") -> Dict[str, Any]:
        data = await self.request(
            "POST", "/auth/register",
            json={"email": email, "password": password, "fullName": full_name, "role": role},
        )
        self.session.login(data["user"], data["access_token"])
        return data["user"]

    def logout(self) -> None:
        self.session.logout()

    # Availability and calendar

    async def get_availability(self, stylist_id: str, start: date, end: date) -> Dict[str, Any]:
        return await self.request(
            "GET", f"/availability/{stylist_id}",
            params={"start": start.isoformat(), "end": end.isoformat()},
        )

    async def check_slot(self, stylist_id: str, at: datetime, duration: Optional[int] = None) -> Dict[str, Any]:
        params = {"at": at.isoformat()}
        if duration:
            params["duration"] = duration
        return await self.request("GET", f"/availability/{stylist_id}/check", params=params)

    async def get_events(self, start: datetime, end: datetime) -> List[Dict[str, Any]]:
        return await self.request(
            "GET", "/calendar/events",
            params={"start": start.isoformat(), "end": end.isoformat()},
        )

    async def create_blockout(self, start: datetime, duration: int, notes: Optional[str] = None) -> Dict[str, Any]:
        return await self.request(
            "POST", "/calendar/blockout",
            json={"start": start.isoformat(), "duration": duration, "notes": notes},
        )

    async def create_booking(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request("POST", "/bookings/", json=payload)

    # Comments

    async def get_comments(
        self,
        post_id: str,
        parent_id: Optional[str] = None,
        limit: int = 10,
        cursor: Optional[str] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"limit": limit}
        if parent_id:
            params["parentId"] = parent_id
        if cursor:
            params["cursor"] = cursor
        return await self.request("GET", f"/comments/{post_id}", params=params)

    async def create_comment(
        self,
        post_id: str,
        content: str,
        parent_id: Optional[str] = None,
        mentioned_user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.request(
            "POST", f"/comments/{post_id}",
            json={"content": content, "parentId": parent_id, "mentionedUserId": mentioned_user_id},
        )

    async def toggle_like(self, target_type: str, target_id: str) -> Dict[str, Any]:
        return await self.request("POST", "/comments/like", json={"type": target_type, "id": target_id})

    async def delete_comment(self, comment_id: str) -> Dict[str, Any]:
        return await self.request("DELETE", f"/comments/{comment_id}")
