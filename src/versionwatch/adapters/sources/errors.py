"""Translation of httpx and pydantic failures into source errors."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from versionwatch.domain.ports import (
    ParseFailureError,
    RateLimitedError,
    SourceError,
    TransportError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

_TOO_MANY_REQUESTS = 429
_FORBIDDEN = 403


def is_rate_limited(response: httpx.Response) -> bool:
    """429, or GitHub's 403 with an exhausted quota."""

    if response.status_code == _TOO_MANY_REQUESTS:
        return True
    return (
        response.status_code == _FORBIDDEN
        and response.headers.get("x-ratelimit-remaining") == "0"
    )


@contextmanager
def translate_errors(source: str) -> Iterator[None]:
    """Re-raise upstream failures inside the block as :class:`SourceError` subclasses."""

    try:
        yield
    except SourceError:
        raise
    except httpx.HTTPStatusError as exc:
        response = exc.response
        if is_rate_limited(response):
            raise RateLimitedError(
                f"{source}: rate limited (HTTP {response.status_code})", source=source
            ) from exc
        raise TransportError(
            f"{source}: HTTP {response.status_code} for {exc.request.url}", source=source
        ) from exc
    except httpx.HTTPError as exc:
        raise TransportError(f"{source}: {type(exc).__name__}: {exc}", source=source) from exc
    except ValidationError as exc:
        raise ParseFailureError(
            f"{source}: unexpected payload ({exc.error_count()} validation errors)",
            source=source,
        ) from exc
    except ValueError as exc:
        # json.JSONDecodeError and malformed dates
        raise ParseFailureError(f"{source}: malformed payload: {exc}", source=source) from exc
