# SPDX-License-Identifier: MIT

from timediary.cleanup import register_cleanup
from timediary.initialize import initialize
from timediary.terminal.app import run


def main() -> None:
    initialize()
    register_cleanup()
    run()


if __name__ == "__main__":
    main()
