# SPDX-License-Identifier: MIT

from yaml import dump

try:
    from yaml import CDumper as Dumper
except ImportError:
    from yaml import Dumper  # type: ignore[assignment]

from timediary import configuration
from timediary.logger import setup_logging
from timediary.repository.configuration import CONFIGURATION_REPO
from timediary.repository.store import ENTRY_STORE
from timediary.template.ai_config import get_ai_config_template
from timediary.view import state as view_state


def initialize(debug: bool = False) -> None:
    configuration.CONFIG_PATH.mkdir(parents=True, exist_ok=True)
    configuration.load_data_path_configuration()
    configuration.DATA_PATH.mkdir(parents=True, exist_ok=True)

    __ensure_config_files()

    config = CONFIGURATION_REPO.get_config()
    setup_logging(config["log_level"], configuration.LOG_PATH, debug=debug)
    view_state.set_show_header(config["show_header"])

    __ensure_data_files()


def __ensure_config_files() -> None:
    if not configuration.APP_CONFIG_PATH.is_file():
        configuration.APP_CONFIG_PATH.touch()
        config = configuration.get_default_configuration()
        configuration.APP_CONFIG_PATH.write_text(dump(dict(config), Dumper=Dumper))


def __ensure_data_files() -> None:
    # An empty store document with the default AI configuration
    if not configuration.DATA_STORE_PATH.is_file():
        ENTRY_STORE.save_ai_config(get_ai_config_template())
