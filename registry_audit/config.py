"""
Audit configuration.

Endpoints are passed to the fetch collaborator at construction time so
the reconciliation core stays independent of any chain identity.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional
import os

from .errors import ConfigError

DEFAULT_API = "https://api.xion-mainnet-1.burnt.com"

ENV_API = "REGISTRY_AUDIT_API"
ENV_TIMEOUT = "REGISTRY_AUDIT_TIMEOUT"
ENV_REGISTRY = "REGISTRY_AUDIT_REGISTRY"
ENV_README = "REGISTRY_AUDIT_README"

CODE_PATH = "/cosmwasm/wasm/v1/code"
PROPOSALS_PATH = "/cosmos/gov/v1/proposals"


@dataclass(frozen=True)
class AuditConfig:
    api_base_url: str = DEFAULT_API
    timeout_seconds: float = 30.0
    user_agent: str = "registry-audit/1.0"
    registry_path: Path = Path("contracts.json")
    readme_path: Path = Path("README.md")
    page_limit: int = 100

    @property
    def code_url(self) -> str:
        return self.api_base_url.rstrip('/') + CODE_PATH

    @property
    def proposals_url(self) -> str:
        return self.api_base_url.rstrip('/') + PROPOSALS_PATH

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'AuditConfig':
        """Defaults overridden by REGISTRY_AUDIT_* environment variables."""
        env = os.environ if environ is None else environ
        config = cls()
        if env.get(ENV_API):
            config = replace(config, api_base_url=env[ENV_API])
        if env.get(ENV_TIMEOUT):
            try:
                timeout = float(env[ENV_TIMEOUT])
            except ValueError as e:
                raise ConfigError(f"{ENV_TIMEOUT} must be a number, got {env[ENV_TIMEOUT]!r}") from e
            config = replace(config, timeout_seconds=timeout)
        if env.get(ENV_REGISTRY):
            config = replace(config, registry_path=Path(env[ENV_REGISTRY]))
        if env.get(ENV_README):
            config = replace(config, readme_path=Path(env[ENV_README]))
        return config
