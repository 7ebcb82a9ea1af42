"""Controller settings resolved from the environment.

Every setting has a default and an environment variable override; the CLI
exposes the same settings as options bound to these variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

NAMESPACE_ENV = "CCOPS_NAMESPACE"
WORKERS_ENV = "CCOPS_WORKERS"
RESYNC_ENV = "CCOPS_RESYNC_SECONDS"
REQUEST_TIMEOUT_ENV = "CCOPS_REQUEST_TIMEOUT"
LOG_LEVEL_ENV = "CCOPS_LOG_LEVEL"

DEFAULT_WORKERS = 2
DEFAULT_RESYNC_SECONDS = 3600
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_LOG_LEVEL = "INFO"


def env_int(name: str, default: int, *, minimum: int | None = None) -> int:
    """Read an integer environment variable, validating a lower bound."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        value = default
    else:
        try:
            value = int(raw)
        except ValueError as exc:
            raise ValueError(f"{name} must be an integer, got: {raw!r}") from exc

    if minimum is not None and value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got: {value}")
    return value


@dataclass(frozen=True)
class ControllerSettings:
    """
    Runtime settings for the ConfigClient controller.

    Attributes:
        namespace: Namespace to watch; None watches all namespaces.
        workers: Number of concurrent reconcile workers.
        resync_seconds: Period of full re-lists; 0 disables resync.
        request_timeout: Timeout in seconds for each Kubernetes API call.
        log_level: Logging level name.
    """

    namespace: str | None = None
    workers: int = DEFAULT_WORKERS
    resync_seconds: int = DEFAULT_RESYNC_SECONDS
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> ControllerSettings:
        """Build settings from `CCOPS_*` environment variables."""
        namespace = os.getenv(NAMESPACE_ENV, "").strip() or None
        log_level = os.getenv(LOG_LEVEL_ENV, "").strip().upper() or DEFAULT_LOG_LEVEL
        return cls(
            namespace=namespace,
            workers=env_int(WORKERS_ENV, DEFAULT_WORKERS, minimum=1),
            resync_seconds=env_int(RESYNC_ENV, DEFAULT_RESYNC_SECONDS, minimum=0),
            request_timeout=env_int(REQUEST_TIMEOUT_ENV, DEFAULT_REQUEST_TIMEOUT, minimum=1),
            log_level=log_level,
        )
