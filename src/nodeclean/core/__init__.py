"""Shared building blocks: errors, logging and resource type metadata."""

from .exceptions import CollaboratorFailure, ConfigError, DecommissionError, InvalidInputError

__all__ = ["CollaboratorFailure", "ConfigError", "DecommissionError", "InvalidInputError"]
