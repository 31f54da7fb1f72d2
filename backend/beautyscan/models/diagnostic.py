"""
Diagnostic result shapes shared by the rule-based and generative classifiers.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class DiagnosticType(str, Enum):
    SKIN = "peau"
    HAIR = "cheveux"
    BEAUTY = "beauty"


@dataclass
class Routine:
    morning: List[str] = field(default_factory=list)
    evening: List[str] = field(default_factory=list)
    weekly: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "morning": list(self.morning),
            "evening": list(self.evening),
            "weekly": list(self.weekly),
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Routine":
        data = data or {}
        return cls(
            morning=[str(s) for s in data.get("morning") or []],
            evening=[str(s) for s in data.get("evening") or []],
            weekly=[str(s) for s in data.get("weekly") or []],
        )


@dataclass
class DiagnosticResult:
    """
    profile_label: skin type, hair global type, or beauty profile category.
    details: type-specific payload, stored verbatim alongside the common fields.
    """
    diagnostic_type: DiagnosticType
    profile_label: str
    ingredients_to_use: List[str] = field(default_factory=list)
    ingredients_to_avoid: List[str] = field(default_factory=list)
    routine: Routine = field(default_factory=Routine)
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "diagnostic_type": self.diagnostic_type.value,
            "profile_label": self.profile_label,
            "ingredients_to_use": list(self.ingredients_to_use),
            "ingredients_to_avoid": list(self.ingredients_to_avoid),
            "routine": self.routine.to_dict(),
            "details": self.details,
        }


class ClassificationError(Exception):
    """The classifier could not produce a conforming result (e.g. malformed model JSON)."""

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


@dataclass
class ClassificationOutcome:
    """
    Either a classified result (error is None) or the default result plus the
    error explaining why it was used.
    """
    result: DiagnosticResult
    error: Optional[ClassificationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def used_default(self) -> bool:
        return self.error is not None

    @classmethod
    def success(cls, result: DiagnosticResult) -> "ClassificationOutcome":
        return cls(result=result)

    @classmethod
    def fallback(cls, default: DiagnosticResult, error: ClassificationError) -> "ClassificationOutcome":
        return cls(result=default, error=error)
