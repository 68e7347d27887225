"""Parsers that summarise the output of terraform commands."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Sequence

# Whitespace as understood by the patterns below: ASCII only.
_WS = r"[\t\n\f\r ]"

_ERROR_LINE = re.compile(rf"^(│{_WS})?(Error: )", re.M)


class ExitCode(IntEnum):
    """Exit status reported for a parsed terraform run."""

    PASS = 0
    FAIL = 1


@dataclass
class ParseResult:
    """Summary of one terraform run."""

    result: str = ""
    has_add_or_update_only: bool = False
    has_destroy: bool = False
    has_no_changes: bool = False
    has_plan_error: bool = False
    exit_code: ExitCode = ExitCode.PASS
    error: str | None = None


class Parser(ABC):
    """Turns the text printed by a terraform command into a ParseResult."""

    @abstractmethod
    def parse(self, body: str) -> ParseResult:
        """Parse the command output held in ``body``."""


def trim_last_newline(lines: Sequence[str]) -> list[str]:
    """Drop a single trailing empty element left by a final newline."""
    if lines and lines[-1] == "":
        return list(lines[:-1])
    return list(lines)


def _first_match(
    lines: list[str], pass_pattern: re.Pattern[str], fail_pattern: re.Pattern[str]
) -> tuple[int, str]:
    """Return the first line matching either pattern, or the last line."""
    return next(
        (
            (index, line)
            for index, line in enumerate(lines)
            if pass_pattern.search(line) or fail_pattern.search(line)
        ),
        (len(lines) - 1, lines[-1]),
    )


class DefaultParser(Parser):
    """Passes the output of any terraform command through unchanged."""

    def parse(self, body: str) -> ParseResult:
        return ParseResult(result=body, exit_code=ExitCode.PASS)


class FmtParser(Parser):
    """Detects a formatting diff printed by ``terraform fmt``."""

    fail_pattern: ClassVar[re.Pattern[str]] = re.compile(r"^@@[^@]+@@", re.M)

    def parse(self, body: str) -> ParseResult:
        if self.fail_pattern.search(body):
            return ParseResult(
                result="There is diff in your .tf file (need to be formatted)",
                exit_code=ExitCode.FAIL,
            )
        return ParseResult()


class ValidateParser(Parser):
    """Detects errors printed by ``terraform validate``."""

    fail_pattern: ClassVar[re.Pattern[str]] = _ERROR_LINE

    def parse(self, body: str) -> ParseResult:
        if self.fail_pattern.search(body):
            return ParseResult(
                result="There is a validation error in your Terraform code",
                exit_code=ExitCode.FAIL,
            )
        return ParseResult()


class PlanParser(Parser):
    """Summarises the output of ``terraform plan``."""

    pass_pattern: ClassVar[re.Pattern[str]] = re.compile(
        r"^((Plan: [0-9]|No changes.)|(Changes to Outputs:))", re.M
    )
    fail_pattern: ClassVar[re.Pattern[str]] = _ERROR_LINE
    # "0 to destroy" counts as no destruction.
    destroy_pattern: ClassVar[re.Pattern[str]] = re.compile(
        r"([1-9][0-9]* to destroy.)", re.M
    )
    no_changes_pattern: ClassVar[re.Pattern[str]] = re.compile(
        r"^(No changes. Infrastructure is up-to-date.)", re.M
    )

    def parse(self, body: str) -> ParseResult:
        if self.pass_pattern.search(body):
            exit_code = ExitCode.PASS
        elif self.fail_pattern.search(body):
            exit_code = ExitCode.FAIL
        else:
            return ParseResult(
                exit_code=ExitCode.FAIL, error="cannot parse plan result"
            )

        lines = body.split("\n")
        index, line = _first_match(lines, self.pass_pattern, self.fail_pattern)
        result = ""
        has_plan_error = False
        if self.pass_pattern.search(line):
            result = line
        elif self.fail_pattern.search(line):
            has_plan_error = True
            result = "\n".join(trim_last_newline(lines[index:]))

        has_destroy = bool(self.destroy_pattern.search(line))
        has_no_changes = bool(self.no_changes_pattern.search(line))
        return ParseResult(
            result=result,
            has_add_or_update_only=not (has_no_changes or has_destroy or has_plan_error),
            has_destroy=has_destroy,
            has_no_changes=has_no_changes,
            has_plan_error=has_plan_error,
            exit_code=exit_code,
        )


class ApplyParser(Parser):
    """Summarises the output of ``terraform apply``."""

    pass_pattern: ClassVar[re.Pattern[str]] = re.compile(r"^(Apply complete!)", re.M)
    fail_pattern: ClassVar[re.Pattern[str]] = _ERROR_LINE

    def parse(self, body: str) -> ParseResult:
        if self.pass_pattern.search(body):
            exit_code = ExitCode.PASS
        elif self.fail_pattern.search(body):
            exit_code = ExitCode.FAIL
        else:
            return ParseResult(
                exit_code=ExitCode.FAIL, error="cannot parse apply result"
            )

        lines = body.split("\n")
        index, line = _first_match(lines, self.pass_pattern, self.fail_pattern)
        result = ""
        if self.pass_pattern.search(line):
            result = line
        elif self.fail_pattern.search(line):
            result = "\n".join(trim_last_newline(lines[index:]))
        return ParseResult(result=result, exit_code=exit_code)