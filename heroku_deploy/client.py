"""
Script: heroku_deploy/client.py
What: Heroku Platform API client for source-blob deploys.
Doing: Creates a source slot, PUTs the artifact bytes to its pre-signed URL, and starts a build from its GET URL.
Why: Keeps request shapes, headers, and error wrapping for the three calls in one place.
Goal: Turn every HTTP failure into a readable `DeployToolError` naming the failed step.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import quote

import httpx

from heroku_deploy.common import DeployToolError

HEROKU_API_BASE = "https://api.heroku.com"
HEROKU_ACCEPT = "application/vnd.heroku+json; version=3"


@dataclass(frozen=True)
class SourceBlob:
    get_url: str
    put_url: str


class HerokuClient:
    """Thin wrapper over `httpx.Client` for the source/build endpoints.

    No timeout is set: a hung call is bounded by the CI job timeout.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = HEROKU_API_BASE,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api = httpx.Client(
            base_url=base_url,
            headers={
                "Accept": HEROKU_ACCEPT,
                "Authorization": f"Bearer {token}",
            },
            timeout=None,
            transport=transport,
        )
        # Upload URLs are pre-signed storage URLs; Heroku credentials stay off them.
        self._storage = httpx.Client(timeout=None, transport=transport)

    def __enter__(self) -> HerokuClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._api.close()
        self._storage.close()

    def create_source(self, app: str) -> SourceBlob:
        """POST /apps/{app}/sources and return the new slot's URLs."""
        step = f"Create source for app '{app}'"
        response = _send(step, self._api.post, f"{_app_path(app)}/sources")
        data = _json_body(step, response)
        source_blob = data.get("source_blob") if isinstance(data, dict) else None
        if not isinstance(source_blob, dict):
            raise DeployToolError(f"{step} failed: response has no source_blob object")

        get_url = str(source_blob.get("get_url") or "")
        put_url = str(source_blob.get("put_url") or "")
        if not get_url or not put_url:
            raise DeployToolError(f"{step} failed: source_blob is missing get_url or put_url")
        return SourceBlob(get_url=get_url, put_url=put_url)

    def upload_artifact(self, put_url: str, data: bytes) -> None:
        """PUT raw artifact bytes to the pre-signed upload URL."""
        # The signed URL expects no content type; an empty header keeps httpx from adding one.
        _send(
            "Upload artifact",
            self._storage.put,
            put_url,
            content=data,
            headers={"Content-Type": ""},
        )

    def create_build(self, app: str, source_url: str, version: str | None = None) -> dict:
        """POST /apps/{app}/builds and return the build JSON."""
        step = f"Create build for app '{app}'"
        source_blob = {"url": source_url}
        if version:
            source_blob["version"] = version
        response = _send(step, self._api.post, f"{_app_path(app)}/builds", json={"source_blob": source_blob})
        data = _json_body(step, response)
        if not isinstance(data, dict):
            raise DeployToolError(f"{step} failed: expected a JSON object")
        return data


def _app_path(app: str) -> str:
    # The app name is always exactly one escaped path segment.
    return f"/apps/{quote(app, safe='')}"


def _send(
    step: str,
    method: Callable[..., httpx.Response],
    url: str,
    **kwargs: Any,
) -> httpx.Response:
    try:
        response = method(url, **kwargs)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise DeployToolError(f"{step} failed: {exc}") from exc

    if not response.is_success:
        raise DeployToolError(
            f"{step} failed: HTTP {response.status_code}: {_error_detail(response)}"
        )
    return response


def _json_body(step: str, response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError as exc:
        raise DeployToolError(f"{step} failed: response is not valid JSON") from exc


def _error_detail(response: httpx.Response) -> str:
    # Heroku errors look like {"id": "not_found", "message": "Couldn't find that app."}.
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text.strip() or response.reason_phrase
