# SPDX-License-Identifier: MIT

from timediary.model.ai_config import AIConfig

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-3.5-turbo"


def get_ai_config_template() -> AIConfig:
    return {
        "api_key": "",
        "base_url": DEFAULT_BASE_URL,
        "model": DEFAULT_MODEL,
    }
