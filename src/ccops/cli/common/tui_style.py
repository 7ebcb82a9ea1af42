"""Questionary / prompt_toolkit theme for ccops.

Questionary uses prompt_toolkit under the hood. This module defines the style
used by the confirmation prompt shown before a reconcile mutates the cluster.
"""

from __future__ import annotations

from prompt_toolkit.styles import Style

QUESTIONARY_STYLE_CONFIRM = Style.from_dict(
    {
        "qmark": "bold ansicyan",
        "question": "bold ansibrightcyan",
        "answer": "bold ansibrightgreen",
        "instruction": "ansibrightblack",
        "error": "bold ansired",
    }
)
