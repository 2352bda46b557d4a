"""API credential lookup.

Priority order:
1. Explicit value (``--token``)
2. Environment variables (os.environ)
3. ``.env.secrets`` in the watched directory or the current directory
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import dotenv_values

from hedgehog.errors import ConfigurationError

SECRETS_FILE = ".env.secrets"

# litellm provider prefix -> environment variable holding its credential
PROVIDER_ENV_VARS = {
    "replicate": "REPLICATE_API_TOKEN",
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "groq": "GROQ_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
}

# Local providers need no credential.
KEYLESS_PROVIDERS = frozenset({"ollama", "ollama_chat"})

TOKEN_HELP_URLS = {
    "replicate": "https://replicate.com/account/api-tokens",
}


@lru_cache(maxsize=4)
def _load_secrets(secrets_path: Path) -> dict[str, str | None]:
    """Load and cache a ``.env.secrets`` file."""
    if secrets_path.exists():
        return dotenv_values(secrets_path)
    return {}


def fetch_secret(
    key: str,
    default: str | None = None,
    search_dirs: tuple[Path, ...] = (),
) -> str | None:
    """Fetch a secret from the environment or a ``.env.secrets`` file.

    Args:
        key: Environment variable name (e.g., "REPLICATE_API_TOKEN")
        default: Default value if not found
        search_dirs: Directories to look for ``.env.secrets`` in, before cwd
    """
    value = os.environ.get(key)
    if value is not None:
        return value

    for directory in (*search_dirs, Path.cwd()):
        secrets = _load_secrets(directory / SECRETS_FILE)
        if secrets.get(key) is not None:
            return secrets[key]

    return default


def clear_secret_cache() -> None:
    """Clear the secrets cache (tests, or after editing .env.secrets)."""
    _load_secrets.cache_clear()


def provider_of(model: str) -> str:
    """Return the litellm provider prefix of a model identifier.

    Bare model names ("gpt-4o", "claude-...") are routed by litellm itself;
    they are mapped to the vendor the name implies.
    """
    if "/" in model:
        return model.split("/", 1)[0]
    if model.startswith("claude"):
        return "anthropic"
    if model.startswith(("gpt-", "o1", "o3", "o4")):
        return "openai"
    return model


def resolve_api_token(
    model: str,
    explicit: str | None = None,
    search_dirs: tuple[Path, ...] = (),
) -> str | None:
    """Find the credential for ``model`` or raise ConfigurationError.

    Returns None for keyless local providers.
    """
    if explicit:
        return explicit

    provider = provider_of(model)
    if provider in KEYLESS_PROVIDERS:
        return None

    env_var = PROVIDER_ENV_VARS.get(provider)
    if env_var is None:
        # Unknown provider: let litellm pick up its own environment.
        return None

    token = fetch_secret(env_var, search_dirs=search_dirs)
    if not token:
        message = (
            f"API token for '{provider}' is required. "
            f"Provide it with --token or set the {env_var} environment variable."
        )
        help_url = TOKEN_HELP_URLS.get(provider)
        if help_url:
            message += f"\nGet your token at {help_url}"
        raise ConfigurationError(message)
    return token
