# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console

from timediary.repository.store import ENTRY_STORE
from timediary.terminal.custom_typer import TimerAwareTyperGroup
from timediary.view.views.settings import ai_config_report

app = typer.Typer(cls=TimerAwareTyperGroup, no_args_is_help=True)

console = Console()


@app.command("view, v")
def view() -> None:
    """Display the AI settings used for the diary."""
    ai_config_report(ENTRY_STORE.get_ai_config())


@app.command("set, s", no_args_is_help=True)
def set(
    api_key: Annotated[
        Optional[str], typer.Option("--api-key", "-k", help="secret sent as bearer token")
    ] = None,
    remove_api_key: Annotated[
        bool, typer.Option("--remove-api-key", "-rk", help="forget the stored key")
    ] = False,
    base_url: Annotated[
        Optional[str],
        typer.Option("--base-url", "-u", help="OpenAI-compatible endpoint root"),
    ] = None,
    model: Annotated[Optional[str], typer.Option("--model", "-m")] = None,
) -> None:
    """Change the AI settings used for the diary."""
    ai_config = ENTRY_STORE.get_ai_config()

    if api_key is not None:
        ai_config["api_key"] = api_key.strip()
    if remove_api_key:
        ai_config["api_key"] = ""
    if base_url is not None:
        ai_config["base_url"] = base_url.strip()
    if model is not None:
        ai_config["model"] = model.strip()

    if not ENTRY_STORE.save_ai_config(ai_config):
        console.print("[red]Error: Could not save the settings.[/red]")
        raise typer.Exit(1)

    ai_config_report(ai_config)
