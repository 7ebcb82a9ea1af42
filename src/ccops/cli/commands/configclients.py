"""Commands for inspecting and reconciling individual ConfigClients."""

from __future__ import annotations

import typer

from ccops.cli.common.context import AppContext, build_context
from ccops.cli.common.exits import EXIT_USAGE, die, exit_from_exc, ok_exit, warn_exit
from ccops.cli.common.options import (
    ConfirmOpt,
    ContextOpt,
    DryRunOpt,
    LogLevelOpt,
    TimeoutOpt,
)
from ccops.cli.common.output import out
from ccops.core.errors import ReconcileError
from ccops.core.models import Request
from ccops.core.plan import plan_reconcile
from ccops.core.reconciler import ConfigClientReconciler, find_owned

app = typer.Typer(
    help="Inspect and reconcile ConfigClients",
    no_args_is_help=False,
    invoke_without_command=True,
)

KeyArg = typer.Argument(..., help="ConfigClient as namespace/name")


@app.callback()
def _init(
    ctx: typer.Context,
    context: str | None = ContextOpt,
    timeout: int | None = TimeoutOpt,
    log_level: str | None = LogLevelOpt,
):
    """Initialize the Kubernetes context."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    ctx.obj = build_context(context, request_timeout=timeout, log_level=log_level)


def _parse_key_or_exit(key: str) -> Request:
    """Validate a namespace/name argument."""
    try:
        request = Request.from_key(key)
    except ValueError as exc:
        exit_from_exc(exc, message=str(exc))
    if not request.namespace:
        die(f"ConfigClients are namespaced, use namespace/name (got '{key}').", code=EXIT_USAGE)
    return request


@app.command()
def owned(ctx: typer.Context, key: str = KeyArg):
    """
    Show the ConfigMaps owned by a ConfigClient.
    """
    appctx: AppContext = ctx.obj
    request = _parse_key_or_exit(key)

    try:
        with out.status("Loading ConfigClient..."):
            parent = appctx.configclients.get(request.namespace, request.name)
        if parent is None:
            die(f"ConfigClient '{request.key}' does not exist.")

        with out.status("Loading ConfigMaps..."):
            items = find_owned(appctx.configmaps, request.namespace, parent.metadata.uid or "")
    except ReconcileError as exc:
        exit_from_exc(exc, message=str(exc))

    if not items:
        warn_exit(f"ConfigClient '{request.key}' owns no ConfigMaps", code=0)
    if len(items) > 1:
        out.warn(f"{len(items)} owned ConfigMaps found; the next reconcile replaces them")

    out.configmaps_table(items, title=f"Owned by {request.key} (uid {parent.metadata.uid})")


@app.command()
def reconcile(
    ctx: typer.Context,
    key: str = KeyArg,
    confirm: bool = ConfirmOpt,
    dry_run: bool = DryRunOpt,
):
    """
    Reconcile a single ConfigClient once, showing the planned changes first.
    """
    appctx: AppContext = ctx.obj
    request = _parse_key_or_exit(key)

    try:
        with out.status("Planning..."):
            actions = plan_reconcile(appctx.configclients, appctx.configmaps, request)
    except ReconcileError as exc:
        exit_from_exc(exc, message=f"Planning failed: {exc}")

    if not actions:
        ok_exit(f"ConfigClient '{request.key}' is up to date")

    out.actions_table(actions)

    if dry_run:
        warn_exit("Dry-run enabled: no ConfigMaps were changed", code=0)

    if confirm and not out.confirm("Apply these changes?"):
        ok_exit("Cancelled")

    reconciler = ConfigClientReconciler(appctx.configclients, appctx.configmaps)
    try:
        with out.status("Reconciling..."):
            reconciler.reconcile(request)
    except ReconcileError as exc:
        exit_from_exc(exc, message=f"Reconcile failed: {exc}")

    out.success(f"ConfigClient '{request.key}' reconciled")
