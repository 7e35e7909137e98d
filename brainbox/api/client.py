"""HTTP client for the remote catalog store and ranking endpoint."""

from __future__ import annotations

import mimetypes
import re
from collections.abc import Callable
from pathlib import Path
from typing import Any

import aiofiles
import aiohttp

from brainbox.api.errors import (
    AuthorizationMissingError,
    CatalogAPIError,
    RemoteError,
    TransportError,
)
from brainbox.catalog.models import ItemDraft, ItemPatch
from brainbox.config import Settings, get_settings
from brainbox.utils.mixins import LoggerMixin

TokenProvider = Callable[[], str | None]

FILE_FIELD = "pdf"
_AUTH_ROUTE = re.compile(r"/auth/")


class CatalogClient(LoggerMixin):
    """Wrapper around the catalog REST API.

    Every request except those under an ``/auth/`` path carries a bearer
    credential. When no credential is available the request is refused with
    ``AuthorizationMissingError`` before anything is sent.
    """

    def __init__(
        self,
        base_url: str,
        *,
        token_provider: TokenProvider | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._token_provider = token_provider or (lambda: None)
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session: aiohttp.ClientSession | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> CatalogClient:
        settings = settings or get_settings()
        return cls(
            settings.api_root,
            token_provider=settings.get_token,
            timeout_seconds=settings.request_timeout_seconds,
        )

    async def get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def list_items(self) -> Any:
        return await self.request("GET", "/items")

    async def create_item(self, draft: ItemDraft) -> Any:
        fields = draft.fields()
        if draft.file is not None:
            form = await self._build_form(fields, draft.file)
            return await self.request("POST", "/items", data=form)
        return await self.request("POST", "/items", json_body=fields)

    async def update_item(self, item_id: str, patch: ItemPatch) -> Any:
        fields = patch.fields()
        path = f"/items/{item_id}"
        if patch.file is not None:
            form = await self._build_form(fields, patch.file)
            return await self.request("PUT", path, data=form)
        return await self.request("PUT", path, json_body=fields)

    async def delete_item(self, item_id: str) -> None:
        await self.request("DELETE", f"/items/{item_id}")

    async def search(self, query: str, section: str | None = None) -> Any:
        body: dict[str, Any] = {"query": query}
        if section:
            body["section"] = section
        return await self.request("POST", "/search", json_body=body)

    def _auth_headers(self, path: str) -> dict[str, str]:
        token = self._token_provider()
        if not token:
            if _AUTH_ROUTE.search(path):
                return {}
            raise AuthorizationMissingError(path)
        return {"Authorization": f"Bearer {token}"}

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        data: Any = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (``None`` if empty)."""
        headers = self._auth_headers(path)
        url = f"{self.base_url}/{path.lstrip('/')}"
        session = await self.get_session()

        self.logger.debug("Dispatching request", method=method, path=path)
        try:
            async with session.request(
                method, url, json=json_body, data=data, headers=headers
            ) as resp:
                body = await self._read_body(resp)
                if resp.status >= 400:
                    message = body.get("message") if isinstance(body, dict) else None
                    self.logger.warning(
                        "Catalog API request failed",
                        method=method,
                        path=path,
                        status=resp.status,
                    )
                    if isinstance(message, str) and message:
                        raise RemoteError(message, status=resp.status)
                    raise TransportError(
                        f"HTTP {resp.status} from {path}", status=resp.status
                    )
                return body
        except CatalogAPIError:
            raise
        except TimeoutError as e:
            self.logger.warning("Catalog API request timed out", path=path)
            raise TransportError(f"Request to {path} timed out") from e
        except aiohttp.ClientError as e:
            self.logger.warning(
                "Client error during catalog request", path=path, error=str(e)
            )
            raise TransportError(str(e) or f"Request to {path} failed") from e

    @staticmethod
    async def _read_body(resp: aiohttp.ClientResponse) -> Any:
        """Decoded JSON body; empty or non-JSON bodies yield ``None``."""
        try:
            return await resp.json(content_type=None)
        except (aiohttp.ContentTypeError, ValueError):
            return None

    @staticmethod
    async def _build_form(
        fields: dict[str, Any], file_path: Path
    ) -> aiohttp.FormData:
        form = aiohttp.FormData()
        for key, value in fields.items():
            if key == "tags":
                value = ",".join(value)
            form.add_field(key, str(value))

        try:
            async with aiofiles.open(file_path, "rb") as f:
                content = await f.read()
        except OSError as e:
            raise CatalogAPIError(f"Cannot read attachment {file_path.name}") from e
        content_type = (
            mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        )
        form.add_field(
            FILE_FIELD, content, filename=file_path.name, content_type=content_type
        )
        return form
