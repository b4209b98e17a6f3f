"""Custom exception hierarchy for flowsketch.

The classifier and layout engine are total functions and raise none of these.
They belong to the layers around the core: the upstream describer, project
storage and configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class FlowsketchError(Exception):
    """Base exception type for all flowsketch errors."""

    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return f"{self.message} | context={self.context}"


class ConfigurationError(FlowsketchError):
    """Raised when configuration is missing or invalid."""


class GenerationError(FlowsketchError):
    """Raised when the upstream flow description cannot be produced."""


class ProjectNotFoundError(FlowsketchError):
    """Raised when a project is not found in the repository."""


class ProjectValidationError(FlowsketchError):
    """Raised when project data is malformed."""
