"""Document store client for the Confluence REST v2 API.

``DocumentStore`` is the contract the session core depends on;
``ConfluenceStore`` implements it over a blocking ``httpx.Client``. Every
failure (transport error, non-2xx status, unexpected payload) is raised as
``StoreError`` so the session loop can surface it without knowing about HTTP.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any, Protocol

import httpx

from .errors import StoreError
from .models import Page, Space

logger = logging.getLogger(__name__)

API_PREFIX = "/wiki/api/v2"
PAGE_LIMIT = 250
REQUEST_TIMEOUT_SECONDS = 30.0


class DocumentStore(Protocol):
    def list_spaces(self) -> list[Space]: ...

    def list_pages(self, space_id: str) -> list[Page]: ...

    def get_page(self, page_id: str) -> Page: ...

    def create_page(self, space_id: str, title: str, content: str = "") -> Page: ...

    def update_page(self, page_id: str, content: str) -> Page: ...

    def update_title(self, page_id: str, title: str) -> None: ...

    def delete_page(self, page_id: str) -> None: ...


def parse_space(item: dict[str, Any]) -> Space:
    return Space(id=str(item["id"]), key=str(item.get("key", "")), name=str(item.get("name", "")))


def parse_page(item: dict[str, Any]) -> Page:
    """Build a ``Page`` from an API object; ``body`` stays ``None`` when not requested."""
    body = None
    storage = (item.get("body") or {}).get("storage")
    if isinstance(storage, dict) and isinstance(storage.get("value"), str):
        body = storage["value"]
    version = item.get("version") or {}
    return Page(
        id=str(item["id"]),
        title=str(item.get("title", "")),
        space_id=str(item.get("spaceId", "")),
        created_at=str(item.get("createdAt", "")),
        body=body,
        version=int(version.get("number", 1)),
    )


class ConfluenceStore:
    def __init__(
        self,
        domain: str,
        username: str,
        token: str,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        base_url = domain if domain.startswith(("http://", "https://")) else f"https://{domain}"
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            auth=(username, token),
            headers={"Accept": "application/json"},
            timeout=REQUEST_TIMEOUT_SECONDS,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ConfluenceStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = path if path.startswith("/wiki/") else f"{API_PREFIX}{path}"
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed", method, url, exc_info=True)
            raise StoreError(f"Could not reach the document store: {exc}") from exc
        if response.is_success:
            return response
        logger.warning("%s %s returned %d", method, url, response.status_code)
        raise StoreError(_describe_failure(response), response.status_code)

    def _json(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        response = self._request(method, path, **kwargs)
        try:
            data = response.json()
        except ValueError as exc:
            raise StoreError("The document store returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise StoreError("The document store returned an unexpected response")
        return data

    def _paginate(self, path: str, params: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """Yield every result across ``_links.next`` pages."""
        data = self._json("GET", path, params=params)
        while True:
            yield from data.get("results", [])
            next_link = (data.get("_links") or {}).get("next")
            if not next_link:
                return
            data = self._json("GET", next_link)

    def list_spaces(self) -> list[Space]:
        return [parse_space(item) for item in self._paginate("/spaces", {"limit": PAGE_LIMIT})]

    def list_pages(self, space_id: str) -> list[Page]:
        params = {"limit": PAGE_LIMIT, "body-format": "storage"}
        return [parse_page(item) for item in self._paginate(f"/spaces/{space_id}/pages", params)]

    def find_pages_by_title(self, title: str) -> list[Page]:
        return [parse_page(item) for item in self._paginate("/pages", {"title": title, "limit": PAGE_LIMIT})]

    def get_page(self, page_id: str) -> Page:
        return parse_page(self._json("GET", f"/pages/{page_id}", params={"body-format": "storage"}))

    def create_page(self, space_id: str, title: str, content: str = "") -> Page:
        payload = {
            "spaceId": space_id,
            "status": "current",
            "title": title,
            "body": {"representation": "storage", "value": content},
        }
        return parse_page(self._json("POST", "/pages", json=payload))

    def update_page(self, page_id: str, content: str) -> Page:
        # The version must be one past the stored one; re-read it right before writing.
        current = self.get_page(page_id)
        payload = {
            "id": page_id,
            "status": "current",
            "title": current.title,
            "version": {"number": current.version + 1},
            "body": {"representation": "storage", "value": content},
        }
        return parse_page(self._json("PUT", f"/pages/{page_id}", json=payload))

    def update_title(self, page_id: str, title: str) -> None:
        self._request("PUT", f"/pages/{page_id}/title", json={"status": "current", "title": title})

    def delete_page(self, page_id: str) -> None:
        try:
            self._request("DELETE", f"/pages/{page_id}")
        except StoreError as exc:
            if exc.status_code in {401, 403}:
                raise StoreError("Token is not authorised to delete this page", exc.status_code) from exc
            if exc.status_code == 404:
                raise StoreError(f"Page with id {page_id} was not found for deletion", 404) from exc
            raise


def _describe_failure(response: httpx.Response) -> str:
    detail = ""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        errors = data.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            detail = str(errors[0].get("title") or errors[0].get("detail") or "")
        elif isinstance(data.get("message"), str):
            detail = data["message"]
    if detail:
        return f"Document store returned {response.status_code}: {detail}"
    return f"Document store returned {response.status_code}"
