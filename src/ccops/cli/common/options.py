"""Common CLI options for the CLI.

Controller settings default to None here so that unset options fall back to
the `CCOPS_*` environment variables read by `ControllerSettings.from_env`.
"""

import typer

ContextOpt = typer.Option(
    None,
    "--context",
    "-c",
    help="Kubeconfig context (defaults to the current context, then in-cluster config)",
)

NamespaceOpt = typer.Option(
    None,
    "--namespace",
    "-n",
    help="Namespace to watch, all namespaces if omitted [env: CCOPS_NAMESPACE]",
)

WorkersOpt = typer.Option(
    None,
    "--workers",
    "-w",
    min=1,
    help="Number of concurrent reconcile workers [env: CCOPS_WORKERS, default: 2]",
)

ResyncOpt = typer.Option(
    None,
    "--resync",
    min=0,
    help="Seconds between full re-lists, 0 disables [env: CCOPS_RESYNC_SECONDS, default: 3600]",
)

TimeoutOpt = typer.Option(
    None,
    "--timeout",
    min=1,
    help="Timeout in seconds per Kubernetes API call [env: CCOPS_REQUEST_TIMEOUT, default: 30]",
)

LogLevelOpt = typer.Option(
    None,
    "--log-level",
    help="Logging level [env: CCOPS_LOG_LEVEL, default: INFO]",
)

ConfirmOpt = typer.Option(
    True,
    "--confirm/--no-confirm",
    help="Ask for confirmation before changing ConfigMaps",
)

DryRunOpt = typer.Option(
    False,
    "--dry-run",
    help="Show which ConfigMaps would change, but don't change anything",
)
