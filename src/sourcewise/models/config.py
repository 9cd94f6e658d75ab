"""Configuration settings for the sourcing engine."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

from .policy import PolicyConfig

# =============================================================================
# Policy loading
# =============================================================================


def _expand_env_vars(value: Any) -> Any:
    """Recursively expand ${VAR} references in config values."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            env_var = value[2:-1]
            return os.environ.get(env_var, value)
        return value
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(v) for v in value]
    return value


def _find_policy_file() -> Path | None:
    config_paths = [
        Path.cwd() / "config" / "scoring-policy.yaml",
        Path(__file__).parent.parent.parent.parent / "config" / "scoring-policy.yaml",
        Path("/app/config/scoring-policy.yaml"),  # Docker path
    ]
    for path in config_paths:
        if path.exists():
            return path
    return None


def load_policy(path: str | Path | None = None) -> PolicyConfig:
    """Load the scoring/negotiation policy.

    Args:
        path: Explicit YAML file. If None, the usual config locations are
            searched; when no file is found the built-in defaults apply.

    Returns:
        A validated PolicyConfig.
    """
    policy_path = Path(path) if path else _find_policy_file()
    if policy_path is None or not policy_path.exists():
        return PolicyConfig()

    with open(policy_path) as f:
        raw = yaml.safe_load(f) or {}

    return PolicyConfig.model_validate(_expand_env_vars(raw))


# =============================================================================
# Application Settings
# =============================================================================


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = ConfigDict(
        env_prefix="SOURCEWISE_",
        env_file=".env",
        extra="ignore",
    )

    # Policy
    policy_path: str = ""

    # Collaborators
    data_source: str = "mock"  # mock, api
    market_data_url: str = "http://localhost:8080"
    market_data_api_key: str = ""
    collaborator_timeout_seconds: float = 5.0

    # Fallback Configuration
    circuit_breaker_threshold: int = 5
    circuit_breaker_timeout_seconds: int = 60

    def get_policy(self) -> PolicyConfig:
        """Load the policy from policy_path, or the default locations."""
        return load_policy(self.policy_path or None)


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
