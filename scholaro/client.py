"""
Async client for the Scholaro API.

The session (token and profile) lives in an explicit ``ClientSession`` owned by
whoever drives the client; nothing is persisted between processes.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ClientSession:
    def __init__(self):
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def load(self, token: str, user: Dict[str, Any]):
        self.token = token
        self.user = user

    def clear(self):
        self.token = None
        self.user = None

    def auth_headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}


class ScholaroClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        session: Optional[ClientSession] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.session = session or ClientSession()
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    async def _call(
        self,
        method: str,
        endpoint: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        response = await self._http.request(
            method, endpoint, json=json, params=params, headers=self.session.auth_headers()
        )
        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            message = body.get("error") if isinstance(body, dict) else None
            logger.debug("%s %s failed with %d", method, endpoint, response.status_code)
            raise ApiError(response.status_code, message or "API call failed")
        return body

    # Accounts

    async def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        return await self._call("POST", "/register", {"name": name, "email": email, "password": password})

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        body = await self._call("POST", "/login", {"email": email, "password": password})
        self.session.load(body["token"], body["user"])
        return body["user"]

    async def restore(self, token: str) -> Dict[str, Any]:
        """Resume a session from a previously issued token."""
        self.session.load(token, None)
        try:
            user = await self._call("GET", "/me")
        except ApiError:
            self.session.clear()
            raise
        self.session.user = user
        return user

    def logout(self):
        self.session.clear()

    # Directory

    async def list_universities(
        self, country: Optional[str] = None, search: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        return await self._call("GET", "/universities", params={"country": country, "search": search})

    async def add_university(self, university: Dict[str, Any]) -> Dict[str, Any]:
        body = await self._call("POST", "/universities", university)
        return body["university"]

    # Practice

    async def get_questions(
        self, test_type: str, section: str, limit: int = 10, difficulty: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        return await self._call(
            "GET",
            f"/questions/{test_type}/{section}",
            params={"limit": limit, "difficulty": difficulty},
        )

    async def check_answer(self, question_id: str, user_answer: int) -> Dict[str, Any]:
        return await self._call(
            "POST", "/check-answer", {"questionId": question_id, "userAnswer": user_answer}
        )

    async def submit_result(self, result: Dict[str, Any]) -> Dict[str, Any]:
        body = await self._call("POST", "/test-results", result)
        return body["result"]

    async def list_results(self) -> List[Dict[str, Any]]:
        return await self._call("GET", "/test-results")

    async def dashboard_stats(self) -> Dict[str, Any]:
        return await self._call("GET", "/dashboard-stats")

    async def load_dashboard(self) -> Dict[str, Any]:
        stats, results = await asyncio.gather(self.dashboard_stats(), self.list_results())
        return {"stats": stats, "results": results}

    async def seed_data(self) -> Dict[str, Any]:
        return await self._call("POST", "/seed-data")
