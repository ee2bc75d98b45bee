"""
Python client for the portfolio API.

Covers what the browsing frontend and the admin dashboard do over the
network: fetch the featured set and category listings, filter works by
category, keep the admin token in client-side storage, and drive
uploads and deletes.
"""

import json
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

import httpx

from portfolio.services.storage import CATEGORIES

log = logging.getLogger(__name__)

ALL = "all"
PORTFOLIO_CATEGORIES = ("digital-sketches", "notebook-sketches", "photography")

_LABELS = {
    "featured": "Featured Works",
    "digital-sketches": "Digital Sketches",
    "notebook-sketches": "Notebook Sketches",
    "photography": "Photography",
}


class ApiError(Exception):
    """Non-2xx answer from the API, carrying the envelope's message."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


@dataclass(frozen=True)
class Work:
    id: str
    title: str
    category: str
    url: str
    filename: str = ""
    upload_date: str = ""

    @classmethod
    def from_json(cls, obj: dict) -> "Work":
        return cls(
            id=obj["id"],
            title=obj.get("title", ""),
            category=obj.get("category", ""),
            url=obj.get("url", ""),
            filename=obj.get("filename", ""),
            upload_date=obj.get("uploadDate", ""),
        )


def category_label(category: str) -> str:
    if category in _LABELS:
        return _LABELS[category]
    return category[:1].upper() + category[1:]


def filter_works(works: Iterable[Work], selected: str = ALL) -> List[Work]:
    if selected == ALL:
        return list(works)
    return [w for w in works if w.category == selected]


class TokenStore:
    """Admin session token persisted as a small JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Optional[str]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            log.warning("Ignoring unreadable token file %s: %s", self.path, exc)
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token}), encoding="utf-8")
        try:
            self.path.chmod(0o600)
        except OSError:
            pass

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


class PortfolioClient:
    def __init__(self, base_url: str = "", token_store: Optional[TokenStore] = None,
                 http: Optional[httpx.Client] = None, timeout: float = 10.0):
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self._owns_http = http is None
        self.tokens = token_store

    def close(self):
        if self._owns_http:
            self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # -- plumbing

    @property
    def token(self) -> Optional[str]:
        return self.tokens.load() if self.tokens else None

    def _auth_headers(self) -> dict:
        token = self.token
        if not token:
            raise ApiError(401, "Not logged in")
        return {"Authorization": f"Bearer {token}"}

    def _request(self, method: str, url: str, **kwargs) -> dict:
        resp = self._http.request(method, url, **kwargs)
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        if resp.status_code >= 400:
            raise ApiError(resp.status_code, body.get("message") or resp.reason_phrase)
        return body

    # -- public browsing

    def photos(self, category: str) -> List[Work]:
        body = self._request("GET", f"/api/photos/{category}")
        return [Work.from_json(obj) for obj in body.get("data") or []]

    def featured(self) -> List[Work]:
        return self.photos("featured")

    def portfolio(self, categories: Iterable[str] = PORTFOLIO_CATEGORIES) -> List[Work]:
        """All works of the given categories; a failing category is skipped."""
        works = []
        for category in categories:
            try:
                works.extend(self.photos(category))
            except (ApiError, httpx.HTTPError) as exc:
                log.error("Error fetching %s: %s", category, exc)
        return works

    # -- admin session

    def login(self, email: str, password: str) -> dict:
        body = self._request("POST", "/api/login", json={"email": email, "password": password})
        if self.tokens is not None:
            self.tokens.save(body["token"])
        return body.get("user") or {}

    def logout(self) -> None:
        if self.tokens is not None:
            self.tokens.clear()

    def register(self, name: str, email: str, password: str) -> str:
        body = self._request("POST", "/api/register",
                             json={"name": name, "email": email, "password": password})
        return body.get("message", "")

    def profile(self) -> dict:
        try:
            body = self._request("GET", "/api/profile", headers=self._auth_headers())
        except ApiError as exc:
            if exc.status_code == 401:
                # stale or forged token: drop it so the next call asks for a login
                self.logout()
            raise
        return body.get("user") or {}

    def upload(self, photo: Union[str, Path, bytes], title: str, category: str,
               filename: Optional[str] = None, content_type: Optional[str] = None) -> Work:
        if category not in CATEGORIES:
            raise ValueError(f"unknown category {category!r}")
        if not title.strip():
            raise ValueError("Please provide a title for the photo")

        if isinstance(photo, bytes):
            data = photo
            filename = filename or "photo"
        else:
            path = Path(photo)
            data = path.read_bytes()
            filename = filename or path.name
        content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"

        body = self._request(
            "POST", "/api/photos/upload",
            headers=self._auth_headers(),
            data={"title": title, "category": category},
            files={"photo": (filename, data, content_type)},
        )
        return Work.from_json(body["data"])

    def delete(self, photo_id: str) -> str:
        body = self._request("DELETE", f"/api/photos/{photo_id}", headers=self._auth_headers())
        return body.get("message", "")
