"""File-driven runner that validates one Swagger document against another."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .loader import load_specification
from .models import AssertionConfig, Specification, ValidationReport
from .schema import DocumentSchemaResolver
from .validator import ContractValidator

logger = logging.getLogger(__name__)


class ContractCheckRunner:
    """
    Loads two Swagger documents and an optional config, then validates.

    Usage:
        runner = ContractCheckRunner("generated.yaml", "documented.yaml")
        report = runner.run()
        report.print_summary()

    Or as a one-liner:
        report = ContractCheckRunner.run_check("generated.yaml", "documented.yaml")
    """

    def __init__(
        self,
        actual_path: str,
        expected_path: str,
        config_path: Optional[str] = None,
        config: Optional[AssertionConfig] = None
    ):
        """
        Initialize the runner.

        Args:
            actual_path: Swagger document produced by the implementation
            expected_path: Hand-written reference Swagger document
            config_path: Optional YAML/JSON assertion config file
            config: Optional config object, used when no config_path is given
        """
        self.actual_path = Path(actual_path)
        self.expected_path = Path(expected_path)
        self.config_path = Path(config_path) if config_path else None
        self._config = config
        self.report: Optional[ValidationReport] = None

    @property
    def config(self) -> AssertionConfig:
        """Load and cache the assertion config."""
        if self._config is None:
            if self.config_path is not None:
                self._config = AssertionConfig.from_file(self.config_path)
            else:
                self._config = AssertionConfig()
        return self._config

    def load(self) -> tuple[Specification, Specification]:
        logger.info("Loading actual document %s", self.actual_path)
        actual = load_specification(self.actual_path)
        logger.info("Loading expected document %s", self.expected_path)
        expected = load_specification(self.expected_path)
        return actual, expected

    def run(self) -> ValidationReport:
        """
        Validate the actual document against the expected one.

        Returns:
            ValidationReport with every mismatch found
        """
        actual, expected = self.load()
        validator = ContractValidator(actual, self.config)
        self.report = validator.check(expected, DocumentSchemaResolver(actual, expected))
        logger.info(
            "Contract check finished: %s (%d mismatches)",
            "match" if self.report.is_match else "mismatch",
            len(self.report.mismatches)
        )
        return self.report

    def print_summary(self):
        if self.report is None:
            print("No contract check has been run yet")
            return

        report = self.report
        status = "MATCH" if report.is_match else "MISMATCH"
        print(f"\nContract check: {status}")
        print(f"  Actual: {self.actual_path}")
        print(f"  Expected: {self.expected_path}")
        print(f"  Checks performed: {report.checks_performed}")
        print(f"  Mismatches: {len(report.mismatches)}")

        if report.mismatches:
            print(f"\nMismatches:")
            for mismatch in report.mismatches:
                print(f"  - [{mismatch.type.value}] {mismatch.context}")
                print(f"    {mismatch.message}")

    @classmethod
    def run_check(
        cls,
        actual_path: str,
        expected_path: str,
        config_path: Optional[str] = None,
        print_report: bool = True
    ) -> ValidationReport:
        """
        Convenience class method to run a check in one call.

        Example:
            report = ContractCheckRunner.run_check("generated.yaml", "documented.yaml")
        """
        runner = cls(actual_path, expected_path, config_path)
        report = runner.run()
        if print_report:
            runner.print_summary()
        return report
