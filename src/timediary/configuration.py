# SPDX-License-Identifier: MIT

import os
from pathlib import Path
from typing import Optional, TypedDict

from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]
import platformdirs

APP_NAME = "timediary"
DATA_PATH_ENV = "TIMEDIARY_DATA_PATH"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"
LOG_PATH = platformdirs.user_log_path(APP_NAME) / "timediary.log"

# These will be set dynamically by load_data_path_configuration()
DATA_PATH: Path = platformdirs.user_data_path(APP_NAME)
DATA_STORE_PATH: Path = DATA_PATH / "store.json"


class Configuration(TypedDict):
    data_path: Optional[str]
    show_header: bool
    request_timeout: float
    refresh_interval: float
    log_level: str


def get_default_configuration() -> Configuration:
    return {
        "data_path": None,
        "show_header": True,
        "request_timeout": 60.0,
        "refresh_interval": 1.0,
        "log_level": "INFO",
    }


def set_data_path(data_path: Path) -> None:
    global DATA_PATH, DATA_STORE_PATH

    DATA_PATH = data_path
    DATA_STORE_PATH = DATA_PATH / "store.json"


def load_data_path_configuration() -> None:
    """
    Resolve DATA_PATH and the store location.

    The environment variable wins over the config file so a second profile
    can be used without touching config.yaml. Must be called before the
    entry store is first read.
    """
    env_path = os.environ.get(DATA_PATH_ENV)
    if env_path:
        set_data_path(Path(env_path).expanduser())
        return

    if not APP_CONFIG_PATH.is_file():
        # Config doesn't exist yet, use defaults
        return

    config: Optional[Configuration] = load(APP_CONFIG_PATH.read_text(), Loader=Loader)
    if config is None:
        return
    data_path_setting = config.get("data_path")

    if data_path_setting is not None:
        set_data_path(Path(data_path_setting).expanduser())
