# SPDX-License-Identifier: MIT

from typing import Annotated

import typer

from timediary import configuration
from timediary.logger import setup_logging
from timediary.repository.configuration import CONFIGURATION_REPO
from timediary.terminal import configuration as configuration_commands
from timediary.terminal import settings
from timediary.terminal.custom_typer import TimerAwareTyperGroup
from timediary.terminal.diary import diary
from timediary.terminal.entry import delete, edit, history
from timediary.terminal.session import ui
from timediary.terminal.timer import start, status, stop
from timediary.view import state as view_state

app = typer.Typer(
    cls=TimerAwareTyperGroup,
    help="time diary - track what you do and how it felt",
    no_args_is_help=True,
)
app.command(name="start, s")(start)
app.command(name="stop, x", no_args_is_help=True)(stop)
app.command(name="status, st")(status)
app.command(name="history, h")(history)
app.command(name="edit, e", no_args_is_help=True)(edit)
app.command(name="delete, d", no_args_is_help=True)(delete)
app.command(name="diary, di")(diary)
app.command(name="ui, u")(ui)
app.add_typer(settings.app, name="settings, se", help="AI settings for the diary")
app.add_typer(configuration_commands.app, name="config, c", help="Application settings")


@app.callback()
def main_callback(
    no_header: Annotated[
        bool,
        typer.Option(
            "--no-header",
            "-nh",
            help="Suppress header output in reports",
        ),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Show debug logging on the console"),
    ] = False,
) -> None:
    """
    time diary - track what you do and how it felt

    Global options that apply to all commands.
    """
    if no_header:
        view_state.set_show_header(False)
    if debug:
        config = CONFIGURATION_REPO.get_config()
        setup_logging(config["log_level"], configuration.LOG_PATH, debug=True)


def run() -> None:
    app()
