# octave_poet/models/validation.py

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, ValidationError, field_validator

from octave_poet.errors import SchemaViolation

logger = logging.getLogger(__name__)

EXPECTED_LINE_COUNT = 8
EXPECTED_LANGUAGE = "English"


class DetectedTheme(Enum):
    """Detected theme: romance, world_peace, mixed (both) or other"""
    ROMANCE = "romance"
    WORLD_PEACE = "world_peace"
    MIXED = "mixed"
    OTHER = "other"

    @staticmethod
    def normalize(value: str) -> str:
        """Map 'world peace' and 'World_Peace' onto the wire spelling"""
        return "_".join(value.strip().lower().split())


EXPECTED_THEMES: Tuple[DetectedTheme, ...] = (DetectedTheme.ROMANCE, DetectedTheme.WORLD_PEACE)


@dataclass(frozen=True)
class LineCountCheck:
    """Line count check; passes only with exactly eight lines"""
    actual: int

    @property
    def expected(self) -> int:
        return EXPECTED_LINE_COUNT

    @property
    def passed(self) -> bool:
        return self.actual == EXPECTED_LINE_COUNT

    def to_dict(self) -> Dict[str, Any]:
        return {"expected": self.expected, "actual": self.actual, "pass": self.passed}


@dataclass(frozen=True)
class LanguageCheck:
    """
    English-only check.

    `reported_pass` is the validator's verdict. Any enumerated non-English
    span fails the check regardless of that verdict.
    """
    issues: Tuple[str, ...] = ()
    reported_pass: bool = True

    def __post_init__(self):
        object.__setattr__(self, "issues", tuple(self.issues))

    @property
    def expected(self) -> str:
        return EXPECTED_LANGUAGE

    @property
    def passed(self) -> bool:
        return self.reported_pass and not self.issues

    def to_dict(self) -> Dict[str, Any]:
        return {"expected": self.expected, "issues": list(self.issues), "pass": self.passed}


@dataclass(frozen=True)
class ThemeCheck:
    """Theme check; passes only for exactly one allowed theme"""
    detected: DetectedTheme

    @property
    def expected(self) -> Tuple[DetectedTheme, ...]:
        return EXPECTED_THEMES

    @property
    def passed(self) -> bool:
        return self.detected in EXPECTED_THEMES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "expected": [theme.value for theme in self.expected],
            "detected": self.detected.value,
            "pass": self.passed,
        }


# Wire shape of the validator's reply. These models are the output-shape
# constraint sent to the collaborator and the strict decoder for its reply.

class _WireModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class LineCountReport(_WireModel):
    """Validation results for the line count requirement"""
    expected: Literal[8] = Field(description="The required number of lines for the poem (always 8)")
    actual: StrictInt = Field(ge=0, description="The actual number of lines counted in the submitted poem")
    passed: StrictBool = Field(alias="pass", description="Whether the poem contains exactly 8 lines")


class LanguageReport(_WireModel):
    """Validation results for the language requirement"""
    expected: Literal["English"] = Field(description="The required language for the poem (always English)")
    issues: List[StrictStr] = Field(
        description="Non-English words or phrases found in the poem (empty if none)"
    )
    passed: StrictBool = Field(alias="pass", description="Whether the poem is entirely in English")


class ThemeReport(_WireModel):
    """Validation results for the theme requirement"""
    expected: List[Literal["romance", "world_peace"]] = Field(
        description="The allowed themes (always romance and world_peace)"
    )
    detected: DetectedTheme
    passed: StrictBool = Field(alias="pass", description="Whether the poem focuses exclusively on one allowed theme")

    @field_validator("expected", "detected", mode="before")
    @classmethod
    def _normalize_spelling(cls, value: Any) -> Any:
        if isinstance(value, str):
            return DetectedTheme.normalize(value)
        if isinstance(value, list):
            return [DetectedTheme.normalize(item) if isinstance(item, str) else item for item in value]
        return value

    @field_validator("expected")
    @classmethod
    def _lists_both_allowed_themes(cls, value: List[str]) -> List[str]:
        if set(value) != {theme.value for theme in EXPECTED_THEMES}:
            raise ValueError("must list romance and world_peace")
        return value


class ChecksReport(_WireModel):
    """Detailed validation results for each specific requirement"""
    line_count: LineCountReport
    language: LanguageReport
    theme: ThemeReport


class ValidationReport(_WireModel):
    """Complete validation results for a poem, checking line count, language, and theme requirements"""
    validation: ChecksReport
    overall_result: StrictBool = Field(
        description="True if ALL requirements pass, false if ANY requirement fails"
    )
    explanation: StrictStr = Field(
        description="Explanation of the validation results, including reasons for any failures"
    )

    @field_validator("explanation")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("explanation must be a non-empty string")
        return value.strip()


@dataclass(frozen=True)
class ValidationResult:
    """
    Structured assessment of a poem against the octave contract.

    `overall_result` is always derived from the three checks, so
    overall_result == line_count.passed and language.passed and theme.passed
    holds for every instance. Whatever overall verdict the validator claimed
    is kept in `reported_overall_result` and never used for decisions.
    """

    line_count: LineCountCheck
    language: LanguageCheck
    theme: ThemeCheck
    explanation: str
    reported_overall_result: Optional[bool] = field(default=None, compare=False)

    def __post_init__(self):
        if not isinstance(self.explanation, str) or not self.explanation.strip():
            raise ValueError("explanation must be a non-empty string")

    @property
    def overall_result(self) -> bool:
        return self.line_count.passed and self.language.passed and self.theme.passed

    @property
    def is_consistent_with_report(self) -> bool:
        """False when the validator claimed an overall verdict that contradicts its own checks"""
        return self.reported_overall_result is None or self.reported_overall_result == self.overall_result

    @property
    def failed_checks(self) -> Tuple[str, ...]:
        failed = []
        if not self.line_count.passed:
            failed.append("line_count")
        if not self.language.passed:
            failed.append("language")
        if not self.theme.passed:
            failed.append("theme")
        return tuple(failed)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize in the same shape the validator is asked to produce"""
        return {
            "validation": {
                "line_count": self.line_count.to_dict(),
                "language": self.language.to_dict(),
                "theme": self.theme.to_dict(),
            },
            "overall_result": self.overall_result,
            "explanation": self.explanation,
        }

    @classmethod
    def from_report(cls, report: ValidationReport) -> "ValidationResult":
        """Build a result from a decoded report, re-deriving every pass flag"""
        checks = report.validation
        result = cls(
            line_count=LineCountCheck(actual=checks.line_count.actual),
            language=LanguageCheck(issues=tuple(checks.language.issues), reported_pass=checks.language.passed),
            theme=ThemeCheck(detected=checks.theme.detected),
            explanation=report.explanation,
            reported_overall_result=report.overall_result,
        )

        # Report what the validator got wrong
        if checks.line_count.passed != result.line_count.passed:
            logger.warning(f"Validator reported line_count.pass={checks.line_count.passed} "
                           f"for actual={checks.line_count.actual}; using {result.line_count.passed}")
        if checks.language.passed != result.language.passed:
            logger.warning(f"Validator reported language.pass={checks.language.passed} "
                           f"with issues={checks.language.issues}; using {result.language.passed}")
        if checks.theme.passed != result.theme.passed:
            logger.warning(f"Validator reported theme.pass={checks.theme.passed} "
                           f"for detected={checks.theme.detected.value}; using {result.theme.passed}")
        if not result.is_consistent_with_report:
            logger.warning(f"Validator reported overall_result={report.overall_result}; "
                           f"checks give {result.overall_result}")

        return result

    @classmethod
    def from_dict(cls, data: Any) -> "ValidationResult":
        """
        Decode a ValidationResult from its wire shape.

        Args:
            data: Parsed JSON value

        Returns:
            ValidationResult with every pass flag and the overall result re-derived

        Raises:
            SchemaViolation: If the value does not conform to the shape
        """
        try:
            report = ValidationReport.model_validate(data)
        except ValidationError as e:
            raise SchemaViolation(f"Validator response does not match the ValidationResult shape: {e}") from e
        return cls.from_report(report)


def decode_validation_result(raw: str) -> ValidationResult:
    """
    Decode raw validator output into a ValidationResult.

    Tolerates a markdown code fence around the JSON object, nothing else.

    Raises:
        SchemaViolation: If the text is not JSON or does not match the shape
    """
    if raw is None or not str(raw).strip():
        raise SchemaViolation("Validator returned an empty response", raw_response=raw)

    text = str(raw).strip()
    if text.startswith("```"):
        json_start = text.find('{')
        json_end = text.rfind('}') + 1
        if json_start == -1 or json_end == 0:
            raise SchemaViolation("No JSON object found in validator response", raw_response=raw)
        text = text[json_start:json_end]

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaViolation(f"Validator response is not valid JSON: {e}", raw_response=raw) from e

    try:
        return ValidationResult.from_dict(data)
    except SchemaViolation as e:
        e.raw_response = raw
        raise


def validation_result_schema() -> Dict[str, Any]:
    """JSON Schema sent to the validator as the output-shape constraint"""
    return ValidationReport.model_json_schema()
