"""Commands for running the ConfigClient controller."""

from __future__ import annotations

import signal
import threading

import typer

from ccops.cli.common.context import build_context
from ccops.cli.common.options import (
    ContextOpt,
    LogLevelOpt,
    NamespaceOpt,
    ResyncOpt,
    TimeoutOpt,
    WorkersOpt,
)
from ccops.cli.common.output import out
from ccops.core.controller import Controller
from ccops.core.informer import ConfigClientCache, ConfigClientInformer
from ccops.core.reconciler import ConfigClientReconciler
from ccops.core.workqueue import WorkQueue

app = typer.Typer(
    help="Run the ConfigClient controller",
    no_args_is_help=True,
)


@app.command()
def run(
    context: str | None = ContextOpt,
    namespace: str | None = NamespaceOpt,
    workers: int | None = WorkersOpt,
    resync: int | None = ResyncOpt,
    timeout: int | None = TimeoutOpt,
    log_level: str | None = LogLevelOpt,
):
    """
    Watch ConfigClients and keep one owned ConfigMap per ConfigClient.
    """
    appctx = build_context(
        context,
        namespace=namespace,
        workers=workers,
        resync_seconds=resync,
        request_timeout=timeout,
        log_level=log_level,
    )
    settings = appctx.settings

    queue = WorkQueue()
    cache = ConfigClientCache()
    informer = ConfigClientInformer(
        appctx.configclients,
        cache,
        queue,
        namespace=settings.namespace,
        resync_seconds=settings.resync_seconds,
    )
    controller = Controller(
        queue,
        ConfigClientReconciler(cache, appctx.configmaps),
        workers=settings.workers,
    )

    stop = threading.Event()

    def _on_signal(signum, _frame):
        out.warn(f"Received {signal.Signals(signum).name}, stopping...")
        stop.set()

    signal.signal(signal.SIGINT, _on_signal)
    signal.signal(signal.SIGTERM, _on_signal)

    out.header("ConfigClient controller")
    out.kv(
        {
            "context": appctx.kube_context or "(current)",
            "namespace": settings.namespace or "(all)",
            "workers": settings.workers,
            "resync": f"{settings.resync_seconds}s" if settings.resync_seconds else "off",
        }
    )

    controller.run(stop, informer=informer)

    if not informer.synced.is_set():
        out.error("ConfigClient informer stopped before syncing, see log above.")
        raise typer.Exit(1)
    out.success("Controller stopped")
