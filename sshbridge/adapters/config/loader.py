"""
Configuration loader with priority: CLI > env > TOML > defaults
"""
import os
import tomllib
from pathlib import Path
from typing import Dict, Any, Optional, List

from ...core.client import Credentials
from ...core.constants import (
    CONFIG_SECTION,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_SSH_PORT,
    ENV_PREFIX,
    MAX_PORT,
    MIN_PORT,
)
from ...core.exceptions import ConfigurationError

CONFIG_KEYS = ("host", "port", "user", "password", "key", "timeout")


class ConfigLoader:
    """Configuration loader with priority support"""

    def __init__(self, env_prefix: str = ENV_PREFIX):
        self._env_prefix = env_prefix

    def load_toml(self, path: Path) -> Dict[str, Any]:
        """
        Load TOML configuration file.

        Keys are read from an ``[ssh]`` table when present, otherwise from
        the top level.
        """
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")

        try:
            data = tomllib.loads(path.read_text(encoding='utf-8'))
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigurationError(f"Failed to parse TOML configuration: {e}") from e

        section = data.get(CONFIG_SECTION, data)
        if not isinstance(section, dict):
            raise ConfigurationError(f"[{CONFIG_SECTION}] must be a table")
        return {k: v for k, v in section.items() if k in CONFIG_KEYS}

    def load_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables"""
        config = {}

        for key in CONFIG_KEYS:
            value = os.getenv(f"{self._env_prefix}{key.upper()}")
            if value:
                # Kept as text, typed in build_credentials
                config[key] = value

        return config

    def merge_configs(self, *configs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configurations with priority.
        Later configs override earlier ones; None values never override.
        """
        result = {}

        for config in configs:
            for key, value in config.items():
                if value is not None:
                    result[key] = value

        return result

    def load(
        self,
        toml_path: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None,
        use_env: bool = True,
    ) -> Dict[str, Any]:
        """
        Load configuration with priority: CLI > env > TOML

        Args:
            toml_path: Path to TOML configuration file
            cli_overrides: CLI parameter overrides
            use_env: Whether to load from environment variables

        Returns:
            Merged configuration dictionary
        """
        configs = []

        if toml_path:
            configs.append(self.load_toml(toml_path))

        if use_env:
            configs.append(self.load_env())

        if cli_overrides:
            configs.append(cli_overrides)

        return self.merge_configs(*configs)


def build_credentials(config: Dict[str, Any]) -> Credentials:
    """
    Validate merged configuration and build immutable credentials.

    All problems are collected and reported together.

    Args:
        config: Merged configuration dictionary

    Returns:
        Credentials with the key file contents loaded

    Raises:
        ConfigurationError: If host/user are missing, port or timeout is
            malformed, or the key file cannot be read
    """
    errors: List[str] = []

    host = str(config.get("host") or "").strip()
    user = str(config.get("user") or "").strip()
    if not host:
        errors.append("Missing required --host")
    if not user:
        errors.append("Missing required --user")

    port = _parse_port(config.get("port"), errors)
    timeout = _parse_timeout(config.get("timeout"), errors)

    password = config.get("password") or None
    private_key = None
    key_path = config.get("key")
    if key_path:
        try:
            private_key = Path(str(key_path)).expanduser().read_text(encoding="utf-8")
        except (OSError, RuntimeError, ValueError) as e:
            errors.append(f"Cannot read --key {key_path}: {e}")

    if errors:
        raise ConfigurationError("Configuration error:\n" + "\n".join(errors))

    return Credentials(
        host=host,
        user=user,
        port=port,
        password=str(password) if password is not None else None,
        private_key=private_key,
        timeout=timeout,
    )


def _parse_port(value: Any, errors: List[str]) -> int:
    if value is None or value == "":
        return DEFAULT_SSH_PORT
    try:
        port = int(str(value).strip())
    except ValueError:
        errors.append(f"Invalid --port: {value}")
        return DEFAULT_SSH_PORT
    if not MIN_PORT <= port <= MAX_PORT:
        errors.append(f"Invalid --port: {value} (expected {MIN_PORT}-{MAX_PORT})")
    return port


def _parse_timeout(value: Any, errors: List[str]) -> float:
    if value is None or value == "":
        return DEFAULT_CONNECT_TIMEOUT
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        errors.append(f"Invalid --timeout: {value}")
        return DEFAULT_CONNECT_TIMEOUT
    if timeout <= 0:
        errors.append(f"Invalid --timeout: {value}")
    return timeout
