"""Bearer token extraction from HTTP requests and gRPC metadata."""

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable

from starlette.requests import HTTPConnection

from bearer_auth.core.exceptions import EmptyAuthHeaderError, MalformedAuthHeaderError
from bearer_auth.core.path_matcher import is_skipped
from bearer_auth.core.settings import TokenConfig
from bearer_auth.core.token_config import get_config
from bearer_auth.services.token_service import TokenService

AUTHORIZATION = "authorization"
BEARER_SCHEME = "Bearer"


@runtime_checkable
class HeaderSource(Protocol):
    """Anything that can look up one header / metadata value by name."""

    @property
    def path(self) -> str | None: ...

    def get_header(self, name: str) -> str | None: ...


class HTTPHeaderSource:
    """Starlette/FastAPI request, or any object with ``headers`` and ``url.path``."""

    def __init__(self, request: Any) -> None:
        self._request = request

    @property
    def path(self) -> str | None:
        url = getattr(self._request, "url", None)
        return getattr(url, "path", None)

    def get_header(self, name: str) -> str | None:
        return self._request.headers.get(name)


class ASGIScopeHeaderSource:
    """Raw ASGI connection scope."""

    def __init__(self, scope: Mapping[str, Any]) -> None:
        self._scope = scope

    @property
    def path(self) -> str | None:
        return self._scope.get("path")

    def get_header(self, name: str) -> str | None:
        wanted = name.lower().encode("latin-1")
        for key, value in self._scope.get("headers", []):
            if key.lower() == wanted:
                return value.decode("latin-1")
        return None


class GRPCMetadataSource:
    """gRPC invocation metadata.

    Accepts a servicer context (anything with ``invocation_metadata()``), a
    mapping, or an iterable of ``(key, value)`` pairs. gRPC calls carry no
    HTTP path, so skip paths never apply.
    """

    path = None

    def __init__(self, metadata: Any) -> None:
        if hasattr(metadata, "invocation_metadata"):
            metadata = metadata.invocation_metadata() or ()
        if isinstance(metadata, Mapping):
            metadata = metadata.items()
        self._metadata: tuple[tuple[str, Any], ...] = tuple(
            (key, value) for key, value in metadata
        )

    def get_header(self, name: str) -> str | None:
        wanted = name.lower()
        for key, value in self._metadata:
            if key.lower() == wanted:
                return value.decode() if isinstance(value, bytes) else value
        return None


def to_header_source(request: Any) -> HeaderSource:
    """Wrap a supported request object in a ``HeaderSource``."""
    if isinstance(request, HeaderSource):
        return request
    if isinstance(request, HTTPConnection):
        return HTTPHeaderSource(request)
    if isinstance(request, Mapping) and "type" in request and "headers" in request:
        return ASGIScopeHeaderSource(request)
    if hasattr(request, "headers") and hasattr(request, "url"):
        return HTTPHeaderSource(request)
    if hasattr(request, "invocation_metadata") or (
        isinstance(request, Iterable) and not isinstance(request, str | bytes)
    ):
        return GRPCMetadataSource(request)
    raise TypeError(f"Unsupported request type: {type(request).__name__}")


def parse_header(value: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` value.

    Raises:
        EmptyAuthHeaderError: The header is absent or empty.
        MalformedAuthHeaderError: The value is not exactly ``Bearer <token>``.
    """
    if not value:
        raise EmptyAuthHeaderError
    scheme, _, token = value.partition(" ")
    if scheme != BEARER_SCHEME or not token or " " in token:
        raise MalformedAuthHeaderError
    return token


def _identity_from_source(
    source: HeaderSource, skip: bool, config: TokenConfig | None
) -> str:
    if config is None:
        config = get_config()
    path = source.path
    if skip and path is not None and is_skipped(path, config.skip_paths):
        return ""
    token = parse_header(source.get_header(AUTHORIZATION))
    return TokenService(config).parse_identity(token, config.signing_key)


def parse_request(request: Any, config: TokenConfig | None = None) -> str:
    """Return the request's identity, or ``""`` when its path is skipped.

    ``config`` pins the snapshot to use; the current one is read otherwise.
    """
    return _identity_from_source(to_header_source(request), True, config)


def parse_request_without_skip(request: Any, config: TokenConfig | None = None) -> str:
    """Return the request's identity; a bearer token is always required."""
    return _identity_from_source(to_header_source(request), False, config)
