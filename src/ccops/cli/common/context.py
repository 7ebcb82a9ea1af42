"""Application context management for the CLI."""

from __future__ import annotations

from dataclasses import dataclass, replace

from kubernetes import client

from ccops.cli.common.exits import die, exit_from_exc
from ccops.cli.common.output import setup_logging
from ccops.core.adapters.configclients import ConfigClientAdapter
from ccops.core.adapters.configmaps import KubernetesConfigMapAdapter
from ccops.core.auth import AuthError, get_api_client
from ccops.core.config import ControllerSettings


@dataclass
class AppContext:
    """Application context holding the Kubernetes client, adapters and settings."""

    kube_context: str | None
    settings: ControllerSettings
    api_client: client.ApiClient
    configclients: ConfigClientAdapter
    configmaps: KubernetesConfigMapAdapter


def resolve_settings(**overrides) -> ControllerSettings:
    """Read settings from the environment and apply CLI overrides that were given."""
    try:
        settings = ControllerSettings.from_env()
    except ValueError as exc:
        exit_from_exc(exc, message=str(exc))
    given = {k: v for k, v in overrides.items() if v is not None}
    if "log_level" in given:
        given["log_level"] = given["log_level"].upper()
    return replace(settings, **given)


def build_context(kube_context: str | None, **overrides) -> AppContext:
    """Build and return the application context.

    Args:
        kube_context: Optional kubeconfig context name.
        overrides: Non-None values replace the matching `ControllerSettings` fields.

    Returns:
        AppContext: Application context with configured client and adapters.
    """
    settings = resolve_settings(**overrides)
    setup_logging(settings.log_level)
    try:
        api_client = get_api_client(kube_context)
    except AuthError as exc:
        die(str(exc))
    return AppContext(
        kube_context=kube_context,
        settings=settings,
        api_client=api_client,
        configclients=ConfigClientAdapter(
            client.CustomObjectsApi(api_client),
            request_timeout=settings.request_timeout,
        ),
        configmaps=KubernetesConfigMapAdapter(
            client.CoreV1Api(api_client),
            request_timeout=settings.request_timeout,
        ),
    )
