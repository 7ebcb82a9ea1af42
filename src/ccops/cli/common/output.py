"""Output formatting utilities for the CLI."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.theme import Theme

from ccops.cli.common.tui_style import QUESTIONARY_STYLE_CONFIRM

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)

_VERB_STYLES = {"create": "ok", "update": "warn", "delete": "err"}


def setup_logging(level: str = "INFO") -> None:
    """Route `logging` records through Rich on the shared console."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # the SDK logs every request at DEBUG
    logging.getLogger("kubernetes").setLevel(logging.WARNING)


def _format_map(value: Mapping[str, Any] | None) -> str:
    if value is None:
        return "[meta]-[/]"
    return ", ".join(f"{k}={v}" for k, v in value.items())


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def hint(self, msg: str) -> None:
        """Print a dimmed follow-up hint."""
        console.print(f"[meta]{msg}[/]")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a Questionary prompt.

        Returns:
            True if the user confirms, False otherwise (including Ctrl-C).
        """
        prompt = questionary.confirm(
            f"[ccops] {message}",
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
        )
        return bool(prompt.ask())

    def configmaps_table(self, configmaps: Iterable[Any], title: str = "ConfigMaps") -> None:
        """
        Expects objects with .metadata and .data (like ccops.core.models.ConfigMap)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Namespace", style="meta", no_wrap=True)
        t.add_column("Name", style="ok", no_wrap=True)
        t.add_column("Resource version", style="meta")
        t.add_column("Labels")
        t.add_column("Data keys")

        for cm in configmaps:
            meta = cm.metadata
            keys = ", ".join(sorted(cm.data)) if cm.data else ""
            t.add_row(
                meta.namespace,
                meta.name,
                str(meta.resource_version or ""),
                _format_map(meta.labels),
                keys,
            )

        console.print(t)

    def actions_table(self, actions: Iterable[Any], title: str = "Planned changes") -> None:
        """
        Expects objects with .verb .namespace .name (like ccops.core.plan.PlannedAction)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Action", no_wrap=True)
        t.add_column("ConfigMap", style="ok")

        for a in actions:
            style = _VERB_STYLES.get(a.verb, "meta")
            t.add_row(f"[{style}]{a.verb}[/{style}]", f"{a.namespace}/{a.name}")

        console.print(t)


out = Out()
