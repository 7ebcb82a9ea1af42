from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from ccops.core.errors import (
    AccessDeniedError,
    ConflictError,
    ExpiredError,
    NotFoundError,
    TransportError,
)


def translate_api_exception(exc: ApiException, what: str) -> Exception:
    """Map an ApiException onto the reconcile error taxonomy."""
    message = f"{what} failed ({exc.status} {exc.reason})"
    if exc.status == 404:
        return NotFoundError(message)
    if exc.status == 409:
        return ConflictError(message)
    if exc.status == 410:
        return ExpiredError(message)
    if exc.status in {401, 403}:
        return AccessDeniedError(message)
    return TransportError(message)


@contextmanager
def api_call(what: str) -> Iterator[None]:
    """Run a Kubernetes API call, translating SDK and transport failures."""
    try:
        yield
    except ApiException as exc:
        raise translate_api_exception(exc, what) from exc
    except HTTPError as exc:  # timeouts, connection resets, retries exhausted
        raise TransportError(f"{what} failed: {exc}") from exc
