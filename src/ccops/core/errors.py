"""Error taxonomy shared by the reconciler and the Kubernetes adapters.

Adapters translate SDK and transport failures into these exceptions so the
core never has to know about `kubernetes.client.ApiException` or urllib3.
"""


class ReconcileError(RuntimeError):
    """Base class for failures surfaced by a reconcile attempt."""


class NotFoundError(ReconcileError):
    """Raised when an object does not exist (HTTP 404)."""


class ConflictError(ReconcileError):
    """Raised on optimistic concurrency conflicts or name clashes (HTTP 409)."""


class TransportError(ReconcileError):
    """Raised on API, network, serialization or timeout failures."""


class InvariantViolation(ReconcileError):
    """Raised when the reconciler is asked to do something that cannot be valid."""


class AccessDeniedError(TransportError):
    """Raised when the API rejects the credentials or RBAC denies access (HTTP 401/403)."""


class ExpiredError(TransportError):
    """Raised when a watch resource version is too old to resume from (HTTP 410)."""
