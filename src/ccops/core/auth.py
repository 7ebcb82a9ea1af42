"""Authentication helpers for Kubernetes.

This module centralizes creation of a Kubernetes ApiClient, trying the local
kubeconfig first and falling back to the in-cluster service account so the
same code path works from a laptop and from a pod.
"""

from __future__ import annotations

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException


class AuthError(RuntimeError):
    """Raised when no usable Kubernetes configuration can be loaded."""


def _format_auth_error(message: str, context: str | None) -> str:
    """Return a user-friendly auth error message."""
    if context:
        return (
            f"Kubernetes configuration for context '{context}' could not be loaded: "
            f"{message}\nCheck the context name with:\n  $ kubectl config get-contexts"
        )
    return f"Kubernetes configuration could not be loaded: {message}"


def get_api_client(context: str | None = None) -> client.ApiClient:
    """
    Create and return a configured Kubernetes ApiClient.

    If a context is given it must exist in the kubeconfig. Without a context
    the current kubeconfig context is used, and when no kubeconfig exists the
    in-cluster service account configuration is tried.
    """
    try:
        return config.new_client_from_config(context=context)
    except ConfigException as exc:
        if context:
            raise AuthError(_format_auth_error(str(exc), context)) from exc
        kubeconfig_error = exc

    try:
        config.load_incluster_config()
    except ConfigException as exc:
        raise AuthError(_format_auth_error(str(kubeconfig_error), None)) from exc
    return client.ApiClient()
