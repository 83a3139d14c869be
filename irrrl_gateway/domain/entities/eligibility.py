"""Eligibility report entity."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class EligibilityReport:
    """
    Itemized result of VA IRRRL eligibility verification.

    Produced on demand; failed checks disqualify, warnings do not.
    """

    passed_checks: List[str] = field(default_factory=list)
    failed_checks: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    summary: str = ""

    @property
    def is_eligible(self) -> bool:
        return len(self.failed_checks) == 0

    def to_dict(self) -> dict:
        return {
            "is_eligible": self.is_eligible,
            "passed_checks": list(self.passed_checks),
            "failed_checks": list(self.failed_checks),
            "warnings": list(self.warnings),
            "summary": self.summary,
        }
