# SPDX-License-Identifier: MIT

import atexit
import logging

from timediary.repository.configuration import CONFIGURATION_REPO


def flush_and_sync() -> None:
    # The entry store writes through on every mutation, only the
    # configuration is buffered
    CONFIGURATION_REPO.flush()
    logging.shutdown()


def register_cleanup() -> None:
    atexit.register(flush_and_sync)
