"""Pydantic schemas defining configuration contracts."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_VAR_DIR = Path("/var/lib/nodeclean")
DEFAULT_SSL_DIR = DEFAULT_VAR_DIR / "ssl"


class CertificateAuthorityConfig(BaseModel):
    # Whether this process is authoritative for certificate issuance.
    enabled: bool = False
    ssl_dir: Path = DEFAULT_SSL_DIR

    @property
    def ca_dir(self) -> Path:
        return self.ssl_dir / "ca"


class CacheConfig(BaseModel):
    var_dir: Path = DEFAULT_VAR_DIR
    facts_dir: Optional[Path] = None
    node_dir: Optional[Path] = None
    reports_dir: Optional[Path] = None

    @model_validator(mode="after")
    def _derive_directories(self) -> "CacheConfig":
        if self.facts_dir is None:
            self.facts_dir = self.var_dir / "yaml" / "facts"
        if self.node_dir is None:
            self.node_dir = self.var_dir / "yaml" / "node"
        if self.reports_dir is None:
            self.reports_dir = self.var_dir / "reports"
        return self


class StoredConfigConfig(BaseModel):
    enabled: bool = False
    database_url: str = "sqlite:///" + str(DEFAULT_VAR_DIR / "storeconfigs.sqlite3")
    # Extra native types and user-defined types, name -> attribute / argument names
    native_types: Dict[str, List[str]] = Field(default_factory=dict)
    definitions: Dict[str, List[str]] = Field(default_factory=dict)

    @field_validator("database_url")
    @classmethod
    def _non_empty_url(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("database_url must not be empty")
        return value


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    json_logs: bool = False
    log_dir: Optional[Path] = None
    trace: bool = False

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level '{value}'")
        return level


class DecommissionConfig(BaseModel):
    ca: CertificateAuthorityConfig = Field(default_factory=CertificateAuthorityConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    storeconfigs: StoredConfigConfig = Field(default_factory=StoredConfigConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    failure_policy: Literal["abort", "continue"] = "abort"
