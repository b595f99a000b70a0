"""
Arrangement - song structures and their playback timeline.

This module provides:
- ArrangementScheduler: Structure generation and scheduling
- StructureValidator: Structure checks before scheduling
"""

from chuk_mcp_composer.arrangement.scheduler import ArrangementScheduler, energy_envelope
from chuk_mcp_composer.arrangement.validator import (
    StructureValidator,
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
    validate_structure,
)

__all__ = [
    "ArrangementScheduler",
    "StructureValidator",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSeverity",
    "energy_envelope",
    "validate_structure",
]
