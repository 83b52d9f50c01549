# SPDX-License-Identifier: MIT

from typing import TypedDict


class AIConfig(TypedDict):
    api_key: str
    base_url: str
    model: str
