# SPDX-License-Identifier: MIT

from rich.console import Console
from rich.table import Table

from timediary.model.ai_config import AIConfig
from timediary.view.views.header import header


def mask_api_key(api_key: str) -> str:
    if not api_key:
        return "✗ not set"
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:3]}…{api_key[-4:]}"


def ai_config_report(ai_config: AIConfig) -> None:
    header("AI configuration")

    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("base_url", ai_config["base_url"])
    table.add_row("api_key", mask_api_key(ai_config["api_key"]))
    table.add_row("model", ai_config["model"])

    console = Console()
    console.print(table)
