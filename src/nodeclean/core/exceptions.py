"""Common exception hierarchy used across nodeclean."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(eq=False)
class DecommissionError(RuntimeError):
    message: str
    code: str = "decommission_error"
    metadata: Dict[str, Any] = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        super().__init__(self.message)
        if self.metadata is None:
            self.metadata = {}

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "metadata": self.metadata}


@dataclass(eq=False)
class InvalidInputError(DecommissionError):
    code: str = "invalid_input"


@dataclass(eq=False)
class CollaboratorFailure(DecommissionError):
    """A certificate, cache or database call failed while cleaning a node."""

    code: str = "collaborator_failure"


@dataclass(eq=False)
class ConfigError(DecommissionError):
    code: str = "config_error"
