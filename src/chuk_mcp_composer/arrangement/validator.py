"""
Structure Validator - checks a song structure before it is scheduled.

Validates:
- The structure has sections and bars
- Section lengths are positive
- Snapshot references fit the snapshot pool
- Tempo automation is unambiguous

Nothing here is fatal to scheduling: the scheduler clamps what it can,
so most findings are warnings describing what will be clamped.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from chuk_mcp_composer.constants import SnapshotMode
from chuk_mcp_composer.models.arrangement import SectionArchetype, Structure

LONG_SECTION_BARS = 256


class ValidationSeverity(str, Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Structure cannot be used
    WARNING = "warning"  # Will be clamped when scheduled
    INFO = "info"  # Informational only


@dataclass
class ValidationIssue:
    """A single validation issue."""

    severity: ValidationSeverity
    code: str
    message: str
    location: str | None = None

    def __str__(self) -> str:
        prefix = f"[{self.severity.value.upper()}]"
        location = f" at {self.location}" if self.location else ""
        return f"{prefix} {self.code}: {self.message}{location}"


class ValidationResult:
    """Result of validating a structure."""

    def __init__(self) -> None:
        self.issues: list[ValidationIssue] = []

    def add_error(self, code: str, message: str, location: str | None = None) -> None:
        self.issues.append(ValidationIssue(ValidationSeverity.ERROR, code, message, location))

    def add_warning(self, code: str, message: str, location: str | None = None) -> None:
        self.issues.append(ValidationIssue(ValidationSeverity.WARNING, code, message, location))

    def add_info(self, code: str, message: str, location: str | None = None) -> None:
        self.issues.append(ValidationIssue(ValidationSeverity.INFO, code, message, location))

    @property
    def is_valid(self) -> bool:
        """Return True if no errors (warnings/info are OK)."""
        return not self.errors

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    @property
    def codes(self) -> list[str]:
        """Issue codes in the order they were found."""
        return [i.code for i in self.issues]

    def __bool__(self) -> bool:
        return self.is_valid

    def __str__(self) -> str:
        if not self.issues:
            return "Validation passed: no issues found"
        return "\n".join(str(issue) for issue in self.issues)


class StructureValidator:
    """Validates a structure against a snapshot pool."""

    def __init__(self, slot_count: int = SnapshotMode.EPIC.slot_count):
        self.slot_count = slot_count

    def validate(self, structure: Structure) -> ValidationResult:
        """
        Validate a structure.

        Args:
            structure: The structure to validate

        Returns:
            ValidationResult with any issues found
        """
        result = ValidationResult()

        if not structure.sections:
            result.add_error("NO_SECTIONS", "Structure has no sections", "sections")
            return result

        for index, section in enumerate(structure.sections):
            location = f"sections/{index}/{section.name}"

            if section.bars < 1:
                result.add_warning(
                    "INVALID_SECTION_LENGTH",
                    f"Section '{section.name}' has {section.bars} bars; it will play 1",
                    location,
                )
            elif section.bars > LONG_SECTION_BARS:
                result.add_warning(
                    "LONG_SECTION",
                    f"Section '{section.name}' is very long: {section.bars} bars",
                    location,
                )

            if not 0 <= section.snapshot < self.slot_count:
                result.add_warning(
                    "SNAPSHOT_OUT_OF_RANGE",
                    f"Section '{section.name}' references snapshot {section.snapshot}; "
                    f"the pool has {self.slot_count} slots",
                    location,
                )

            if section.tempo_ramp and section.tempo_slam:
                result.add_info(
                    "TEMPO_CONFLICT",
                    f"Section '{section.name}' both ramps and slams the tempo; the ramp wins",
                    location,
                )

        if not any(s.archetype is SectionArchetype.DROP for s in structure.sections):
            result.add_info("NO_PEAK", "Structure has no drop or chorus", "sections")

        return result


def validate_structure(
    structure: Structure, slot_count: int = SnapshotMode.EPIC.slot_count
) -> ValidationResult:
    """
    Convenience function to validate a structure.

    Args:
        structure: The structure to validate
        slot_count: Size of the snapshot pool

    Returns:
        ValidationResult with any issues found
    """
    return StructureValidator(slot_count).validate(structure)
