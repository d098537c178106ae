"""Soft assertion collection for SwaggerDiff."""

from __future__ import annotations

import logging
from typing import Any

from .models import Mismatch, MismatchType, ValidationReport
from .exceptions import ContractMismatchError

logger = logging.getLogger(__name__)


class FailureCollector:
    """
    Accumulates independent mismatches during a validation run.

    Nothing is raised while recording; ``finish()`` raises a single
    ContractMismatchError listing everything, or returns quietly.
    """

    def __init__(self):
        self.mismatches: list[Mismatch] = []
        self.checks_performed = 0

    def check(self):
        """Count one executed assertion, whether it passed or not."""
        self.checks_performed += 1

    def record(
        self,
        context: str,
        mismatch_type: MismatchType,
        message: str,
        expected: Any = None,
        actual: Any = None
    ):
        """Add a mismatch entry."""
        mismatch = Mismatch(
            context=context,
            type=mismatch_type,
            message=message,
            expected=expected,
            actual=actual,
        )
        logger.debug("Mismatch recorded: %s", mismatch)
        self.mismatches.append(mismatch)

    @property
    def has_failures(self) -> bool:
        return len(self.mismatches) > 0

    def report(self) -> ValidationReport:
        return ValidationReport(
            is_match=not self.has_failures,
            checks_performed=self.checks_performed,
            mismatches=list(self.mismatches),
        )

    def finish(self):
        """Raise every recorded mismatch at once, if there are any."""
        if self.mismatches:
            raise ContractMismatchError(self.mismatches)
