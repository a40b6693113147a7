import logging
from pathlib import Path

import aiohttp

from safebox.client.session import UserSession

logger = logging.getLogger(__name__)


class SafeBoxAPIError(Exception):
    def __init__(self, status: int, message: str):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message


class SafeBoxClient:
    """Async client for the SafeBox REST API."""

    def __init__(self, base_url: str, session: UserSession | None = None, api_prefix: str = "/api"):
        self.base_url = base_url.rstrip("/")
        self.api_url = self.base_url + api_prefix
        self.session = session or UserSession()
        self._http: aiohttp.ClientSession | None = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def close(self) -> None:
        if self._http is not None and not self._http.closed:
            await self._http.close()
        self._http = None

    def _client(self) -> aiohttp.ClientSession:
        if self._http is None or self._http.closed:
            self._http = aiohttp.ClientSession()
        return self._http

    @staticmethod
    async def _payload(resp: aiohttp.ClientResponse) -> dict:
        try:
            payload = await resp.json()
        except (aiohttp.ContentTypeError, ValueError):
            payload = {"success": False, "message": await resp.text()}
        if resp.status >= 400 or not payload.get("success", False):
            raise SafeBoxAPIError(resp.status, payload.get("message") or resp.reason or "Request failed")
        return payload

    async def _request(self, method: str, path: str, auth: bool = True, **kwargs) -> dict:
        headers = kwargs.pop("headers", {})
        if auth:
            headers.update(self.session.headers())
        async with self._client().request(method, self.api_url + path, headers=headers, **kwargs) as resp:
            return await self._payload(resp)

    async def sign_in(self, email: str, name: str | None = None, token: str | None = None) -> dict:
        """Get-or-create the user for a verified email and fill the session."""
        payload = await self._request(
            "POST", "/users/get-or-create", auth=False, json={"email": email, "name": name})
        user = payload["data"]
        self.session.login(user["id"], user["email"], user.get("name"), token)
        return user

    def sign_out(self) -> None:
        self.session.clear()

    async def list_files(self, favorite: bool = False) -> list[dict]:
        params = {"favorite": "true"} if favorite else None
        return (await self._request("GET", "/files", params=params))["data"]

    async def get_file(self, file_id: int) -> dict:
        return (await self._request("GET", f"/files/{file_id}"))["data"]

    async def upload(self, path: str | Path, content_type: str | None = None) -> dict:
        path = Path(path)
        form = aiohttp.FormData()
        with open(path, "rb") as fh:
            form.add_field("file", fh.read(), filename=path.name,
                           content_type=content_type or "application/octet-stream")
        return (await self._request("POST", "/files/upload", data=form))["data"]

    async def toggle_favorite(self, file_id: int) -> bool:
        return (await self._request("PATCH", f"/files/{file_id}/favorite"))["favorite"]

    async def delete_file(self, file_id: int) -> None:
        await self._request("DELETE", f"/files/{file_id}")

    async def download(self, file_id: int) -> bytes:
        url = f"{self.api_url}/files/{file_id}/download"
        async with self._client().get(url, headers=self.session.headers()) as resp:
            if resp.status >= 400:
                await self._payload(resp)
            return await resp.read()

    async def activity(self) -> list[dict]:
        return (await self._request("GET", "/activity"))["data"]

    async def stats(self) -> dict:
        return (await self._request("GET", "/stats"))["data"]
