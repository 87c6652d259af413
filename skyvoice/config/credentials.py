"""Externally supplied secrets, read from the environment at first use."""

import os

FORECAST_API_KEY_ENV = "PIRATE_WEATHER_API_KEY"
LLM_API_KEY_ENV = "LLM_API_KEY"
LLM_API_KEY_FALLBACK_ENV = "OPENAI_API_KEY"


class MissingSecretError(Exception):
    """Raised when a required secret is absent at the point of use."""

    def __init__(self, env_var: str):
        super().__init__(f"{env_var} not set")
        self.env_var = env_var


def require_secret(*env_vars: str) -> str:
    """Return the first non-empty value among env_vars."""
    for name in env_vars:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    raise MissingSecretError(env_vars[0])


def forecast_api_key() -> str:
    return require_secret(FORECAST_API_KEY_ENV)


def llm_api_key() -> str:
    return require_secret(LLM_API_KEY_ENV, LLM_API_KEY_FALLBACK_ENV)
