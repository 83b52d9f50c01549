# SPDX-License-Identifier: MIT

"""Per-invocation render settings, kept in context variables."""

from contextvars import ContextVar

# Headers are printed above reports unless --no-header or the
# show_header setting turns them off
_show_header_var: ContextVar[bool] = ContextVar("show_header", default=True)


def set_show_header(value: bool) -> None:
    _show_header_var.set(value)


def get_show_header() -> bool:
    """True when report views should print the "time diary" header."""
    return _show_header_var.get()
