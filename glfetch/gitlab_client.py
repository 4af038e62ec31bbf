"""Async GitLab API client with a single authenticated fetch-and-decode primitive."""

import asyncio
import contextlib
import logging
from functools import lru_cache
from types import TracebackType
from typing import Any, Literal, Self, TYPE_CHECKING, TypeVar
from collections.abc import Mapping
from urllib.parse import quote

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

if TYPE_CHECKING:
    from glfetch.config import AppSettings

LOGGER = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)
TransportCause = Literal["connection", "timeout", "cancelled", "protocol"]

_ALLOWED_SCHEMES = frozenset({"http", "https"})
_BODY_EXCERPT_LIMIT = 200


class GitLabAPIError(RuntimeError):
    """Base class for failures surfaced by the GitLab client."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Attach HTTP status metadata to the exception instance."""
        super().__init__(message)
        self.status_code = status_code


class RequestBuildError(GitLabAPIError):
    """Raised when a request cannot be constructed from the supplied inputs."""


class TransportError(GitLabAPIError):
    """Raised when the network exchange with GitLab fails or is aborted."""

    def __init__(self, message: str, *, cause: TransportCause) -> None:
        """Record why the exchange did not complete."""
        super().__init__(message)
        self.cause: TransportCause = cause


class DecodeError(GitLabAPIError):
    """Raised when a response body is not a list of the expected records."""


class ResponseStatusError(DecodeError):
    """Raised when GitLab answers with a non-success status instead of records."""


def encode_path_segment(value: str) -> str:
    """Percent-encode a project path or ref so it forms a single URL segment."""
    return quote(value, safe="")


def project_path(project: str, resource: str) -> str:
    """Return the API path of a project-scoped resource."""
    return f"/projects/{encode_path_segment(project)}/{resource.lstrip('/')}"


@lru_cache(maxsize=None)
def _list_adapter(record_type: type[BaseModel]) -> TypeAdapter[list[Any]]:
    return TypeAdapter(list[record_type])  # type: ignore[valid-type]


class GitLabClient:
    """Asynchronous client for read-only GitLab REST API listings."""

    def __init__(
        self,
        token: str,
        base_url: str,
        *,
        api_version: str = "v3",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Validate the base URL and prepare an authenticated HTTP client."""
        if any(not character.isprintable() for character in token):
            msg = "GitLab token must not contain control characters"
            raise RequestBuildError(msg)
        api_base = _api_base(base_url, api_version)
        try:
            self._client = httpx.AsyncClient(
                base_url=api_base,
                headers={
                    "User-Agent": "glfetch/0.1",
                    "Accept": "application/json",
                    "PRIVATE-TOKEN": token,
                },
                timeout=httpx.Timeout(timeout),
                transport=transport,
            )
        except (UnicodeEncodeError, ValueError) as exc:
            msg = f"Cannot build GitLab request headers: {exc}"
            raise RequestBuildError(msg) from exc
        self._api_base = api_base

    @classmethod
    def from_settings(
        cls,
        settings: "AppSettings",
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> Self:
        """Create a client from loaded application settings."""
        return cls(
            settings.gitlab.token.get_secret_value(),
            str(settings.gitlab.url),
            api_version=settings.gitlab.api_version,
            timeout=settings.gitlab.timeout,
            transport=transport,
        )

    @property
    def api_base(self) -> str:
        """Return the absolute URL every request path is appended to."""
        return self._api_base

    async def __aenter__(self) -> Self:
        """Enter the async context manager and return the client."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Ensure the underlying HTTP client is closed when exiting the context."""
        del exc_type, exc, tb
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()

    async def fetch_records(
        self,
        path: str,
        record_type: type[RecordT],
        *,
        params: Mapping[str, str] | None = None,
        deadline: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> list[RecordT]:
        """Issue an authenticated GET and decode the body as a list of records.

        ``deadline`` bounds the whole exchange in seconds and ``cancel`` aborts it
        when set. Both surface as :class:`TransportError`.
        """
        request = self._build_request(path, params)
        LOGGER.debug("GET %s", request.url)
        response = await self._dispatch(request, deadline=deadline, cancel=cancel)
        if not response.is_success:
            message = (
                f"GitLab API returned {response.status_code}: "
                f"{response.text[:_BODY_EXCERPT_LIMIT]}"
            )
            raise ResponseStatusError(message, status_code=response.status_code)
        payload = self.parse_json(response)
        try:
            records: list[RecordT] = _list_adapter(record_type).validate_python(payload)
        except ValidationError as exc:
            message = (
                f"GitLab API returned a payload that is not a list of "
                f"{record_type.__name__} records: {exc.error_count()} validation error(s)"
            )
            raise DecodeError(message, status_code=response.status_code) from exc
        LOGGER.debug("Decoded %d %s records from %s", len(records), record_type.__name__, request.url)
        return records

    def parse_json(self, response: httpx.Response) -> Any:
        """Decode a JSON response or raise a DecodeError on failure."""
        try:
            return response.json()
        except ValueError as exc:
            content_type = response.headers.get("Content-Type", "unknown")
            message = (
                "GitLab API returned an invalid JSON payload "
                f"(status {response.status_code}, content-type {content_type})"
            )
            raise DecodeError(message, status_code=response.status_code) from exc

    def _build_request(self, path: str, params: Mapping[str, str] | None) -> httpx.Request:
        try:
            return self._client.build_request("GET", path, params=params)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, UnicodeEncodeError) as exc:
            msg = f"Cannot build GitLab request for {path!r}: {exc}"
            raise RequestBuildError(msg) from exc

    async def _dispatch(
        self,
        request: httpx.Request,
        *,
        deadline: float | None,
        cancel: asyncio.Event | None,
    ) -> httpx.Response:
        if cancel is not None and cancel.is_set():
            msg = f"Request to {request.url} was cancelled before it was sent"
            raise TransportError(msg, cause="cancelled")
        exchange = asyncio.ensure_future(self._send(request))
        watched: set[asyncio.Future[Any]] = {exchange}
        stopper: asyncio.Future[Any] | None = None
        if cancel is not None:
            stopper = asyncio.ensure_future(cancel.wait())
            watched.add(stopper)
        try:
            done, _ = await asyncio.wait(watched, timeout=deadline, return_when=asyncio.FIRST_COMPLETED)
        except BaseException:
            exchange.cancel()
            raise
        finally:
            if stopper is not None:
                stopper.cancel()
        if exchange in done:
            return exchange.result()
        exchange.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await exchange
        if stopper is not None and stopper in done:
            msg = f"Request to {request.url} was cancelled"
            raise TransportError(msg, cause="cancelled")
        msg = f"Request to {request.url} exceeded the {deadline}s deadline"
        raise TransportError(msg, cause="timeout")

    async def _send(self, request: httpx.Request) -> httpx.Response:
        try:
            return await self._client.send(request)
        except httpx.TimeoutException as exc:
            msg = f"Timed out talking to GitLab at {request.url}: {exc}"
            raise TransportError(msg, cause="timeout") from exc
        except httpx.NetworkError as exc:
            msg = f"Cannot reach GitLab at {request.url}: {exc}"
            raise TransportError(msg, cause="connection") from exc
        except httpx.TransportError as exc:
            msg = f"GitLab exchange failed for {request.url}: {exc}"
            raise TransportError(msg, cause="protocol") from exc


def _api_base(base_url: str, api_version: str) -> str:
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        msg = f"Invalid GitLab base URL {base_url!r}: {exc}"
        raise RequestBuildError(msg) from exc
    if url.scheme not in _ALLOWED_SCHEMES or not url.host:
        msg = f"GitLab base URL must be an absolute http(s) URL, got {base_url!r}"
        raise RequestBuildError(msg)
    if url.query or url.fragment:
        msg = f"GitLab base URL must not carry a query or fragment, got {base_url!r}"
        raise RequestBuildError(msg)
    return f"{str(url).rstrip('/')}/api/{api_version}"
