# SPDX-License-Identifier: MIT

import re
from typing import Any, Optional

import click
import typer
import typer.core
from rich.console import Console
from rich.padding import Padding

from timediary.repository.store import ENTRY_STORE
from timediary.service.timer import find_active_entry
from timediary.time import duration_between, duration_to_clock_str, now_utc

console = Console()


def _show_active_timer(ctx: click.Context) -> None:
    """Show the tracking status line once per context chain"""
    if getattr(ctx, "_timer_shown", False):
        return

    current: Optional[click.Context] = ctx
    while current is not None:
        current._timer_shown = True  # type: ignore[attr-defined]
        current = current.parent

    active_entry = find_active_entry(ENTRY_STORE.list_entries())
    if active_entry is None:
        status = "[grey58]Not tracking anything[/grey58]"
    else:
        elapsed = duration_between(active_entry["start_time"], now_utc())
        title = active_entry["title"] or "untitled task"
        status = (
            f"[bold plum1]Tracking: {title} ({duration_to_clock_str(elapsed)})"
            "[/bold plum1]"
        )

    console.print()
    console.print(Padding(status, (0, 0, 0, 1)))


class TimerAwareCommand(typer.core.TyperCommand):
    """Command class that displays the tracking status in help text"""

    def format_help(
        self, ctx: click.Context, formatter: click.formatting.HelpFormatter
    ) -> None:
        _show_active_timer(ctx)
        super().format_help(ctx, formatter)


class AliasedTyperGroup(typer.core.TyperGroup):
    """TyperGroup that supports comma-separated command aliases"""

    _CMD_SPLIT_P = re.compile(r" ?, ?")

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        cmd_name = self._group_cmd_name(cmd_name)
        return super().get_command(ctx, cmd_name)

    def _group_cmd_name(self, default_name: str) -> str:
        """Find the full command name if default_name is an alias"""
        for cmd in self.commands.values():
            name = cmd.name
            if name and default_name in self._CMD_SPLIT_P.split(name):
                return name
        return default_name

    def add_command(self, cmd: click.Command, name: Optional[str] = None) -> None:
        if name is None:
            name = cmd.name

        # Already registered under its aliased name
        existing_name = self._group_cmd_name(name or "")
        if existing_name in self.commands and existing_name != name:
            return

        super().add_command(cmd, name)


class TimerAwareTyperGroup(AliasedTyperGroup):
    """Alias-aware group that displays the tracking status in help text"""

    COMMAND_ORDER = [
        "start, s",
        "stop, x",
        "status, st",
        "history, h",
        "edit, e",
        "delete, d",
        "diary, di",
        "ui, u",
        "settings, se",
        "config, c",
    ]

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.command_class = TimerAwareCommand

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return commands in workflow order rather than insertion order"""
        result = [name for name in self.COMMAND_ORDER if name in self.commands]
        result.extend(name for name in self.commands.keys() if name not in result)
        return result

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        cmd = super().get_command(ctx, cmd_name)

        if cmd is not None and not isinstance(cmd, TimerAwareCommand):
            original_format_help = cmd.format_help

            def timer_aware_format_help(
                help_ctx: click.Context, formatter: click.formatting.HelpFormatter
            ) -> None:
                _show_active_timer(help_ctx)
                original_format_help(help_ctx, formatter)

            cmd.format_help = timer_aware_format_help  # type: ignore

        return cmd

    def format_help(
        self, ctx: click.Context, formatter: click.formatting.HelpFormatter
    ) -> None:
        _show_active_timer(ctx)
        super().format_help(ctx, formatter)
