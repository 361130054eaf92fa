"""Validation Result — outcome of a precondition check or a structural pass."""

from enum import Enum
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from story_kernel.models.world import EntityId


class IssueSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationIssue(BaseModel):
    """A single violated condition, identified by a stable machine-readable code."""

    model_config = ConfigDict(frozen=True)

    code: str                                   # e.g., "WRONG_STARTING_LOCATION"
    message: str                                # Human-readable, names the offending ids
    related_entity_ids: Tuple[EntityId, ...] = ()
    severity: IssueSeverity = IssueSeverity.ERROR
    suggestion: Optional[str] = None


class ValidationResult(BaseModel):
    """Ordered list of issues. Valid iff the list is empty."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: Tuple[ValidationIssue, ...] = ()

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def from_issues(cls, issues: Iterable[ValidationIssue]) -> "ValidationResult":
        issues = tuple(issues)
        return cls(valid=not issues, errors=issues)

    def codes(self) -> List[str]:
        return [e.code for e in self.errors]

    def messages(self) -> List[str]:
        return [e.message for e in self.errors]

    def by_severity(self, severity: IssueSeverity) -> List[ValidationIssue]:
        return [e for e in self.errors if e.severity == severity]
