"""
Lesson: exercise sequencing, pass/fail verdicts and remediation.
"""

from typequest.lesson.remediation import RemediationBranch, RemediationPlan, RemediationStrategy
from typequest.lesson.runner import LessonRunner, LessonState, evaluate_verdict

__all__ = [
    "LessonRunner",
    "LessonState",
    "evaluate_verdict",
    "RemediationBranch",
    "RemediationPlan",
    "RemediationStrategy",
]
