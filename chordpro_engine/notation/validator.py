"""Line-numbered validation of ChordPro text.

The validator runs independently of rendering: it never raises and never
blocks a parse. Problems are reported as ValidationIssue records that an
editor can underline.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Literal

from chordpro_engine.notation.directives import DIRECTIVES_BY_NAME, is_known, resolve_name
from chordpro_engine.notation.models import DirectiveLine, LyricLine
from chordpro_engine.notation.parser import parse, preprocess
from chordpro_engine.notation.segmenter import START_PREFIX
from chordpro_engine.notation.tokenizer import INLINE_CHORD_RE
from chordpro_engine.transposer import parse_chord

logger = logging.getLogger(__name__)

Severity = Literal["error", "warning"]

END_PREFIX = "end_of_"
EMPTY_CHORD_RE = re.compile(r"\[\s*\]")
# Brace-delimited line that did not parse as a directive: {name rest}
LOOSE_DIRECTIVE_RE = re.compile(r"^\s*\{\s*([A-Za-z][\w-]*)([^{}]*)\}\s*$")


@dataclass(frozen=True)
class ValidationIssue:
    """A single validation problem.

    Parameters
    ----------
    line : int | None
        1-based line number, or None for document-level issues.
    column : int | None
        1-based column, or None when the whole line is affected.
    message : str
        Human-readable description.
    severity : Severity
        "error" or "warning".
    code : str
        Stable machine-readable identifier (e.g., "unclosed-brace").
    """

    line: int | None
    column: int | None
    message: str
    severity: Severity
    code: str


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a document.

    Parameters
    ----------
    is_valid : bool
        True when there are no errors (warnings are allowed).
    errors : tuple[ValidationIssue, ...]
        Problems that make the notation ambiguous.
    warnings : tuple[ValidationIssue, ...]
        Suspicious but renderable constructs.
    """

    is_valid: bool
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()

    @property
    def issues(self) -> tuple[ValidationIssue, ...]:
        """Errors and warnings ordered by line."""
        return tuple(
            sorted(
                self.errors + self.warnings,
                key=lambda issue: (issue.line or 0, issue.column or 0),
            )
        )


def _balance_issues(
    line: str, number: int, opener: str, closer: str, noun: str
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    depth = 0
    unmatched_open: int | None = None
    for column, char in enumerate(line, start=1):
        if char == opener:
            if depth == 0:
                unmatched_open = column
            depth += 1
        elif char == closer:
            if depth == 0:
                issues.append(
                    ValidationIssue(
                        number,
                        column,
                        f"Unexpected closing {noun} '{closer}'",
                        "error",
                        f"extra-{noun}",
                    )
                )
            else:
                depth -= 1
    if depth > 0:
        issues.append(
            ValidationIssue(
                number,
                unmatched_open,
                f"Unclosed {noun} '{opener}'",
                "error",
                f"unclosed-{noun}",
            )
        )
    return issues


def check_line(line: str, number: int) -> list[ValidationIssue]:
    """Check bracket balance and empty chords on one line.

    Examples
    --------
    >>> [i.code for i in check_line("{title: X", 1)]
    ['unclosed-brace']
    >>> [i.code for i in check_line("[]la", 3)]
    ['empty-chord']
    """
    issues = _balance_issues(line, number, "{", "}", "brace")
    issues += _balance_issues(line, number, "[", "]", "bracket")
    for match in EMPTY_CHORD_RE.finditer(line):
        issues.append(
            ValidationIssue(number, match.start() + 1, "Empty chord '[]'", "error", "empty-chord")
        )
    return issues


def check_directive_syntax(line: str, number: int) -> ValidationIssue | None:
    """Flag a known directive written without its colon."""
    match = LOOSE_DIRECTIVE_RE.match(line)
    if not match or ":" in match.group(2):
        return None
    name = resolve_name(match.group(1))
    spec = DIRECTIVES_BY_NAME.get(name)
    if spec is None or not spec.requires_value:
        return None
    column = line.index("{") + 1
    return ValidationIssue(
        number, column, f"Directive '{name}' is missing a colon", "error", "missing-colon"
    )


def validate(text: str) -> ValidationResult:
    """Validate ChordPro text.

    Parameters
    ----------
    text : str
        Raw notation text.

    Returns
    -------
    ValidationResult
        Errors for broken brackets, empty chords and colon-less valued
        directives; warnings for unknown directives, unrecognized chords,
        missing title or key and unbalanced section markers.

    Examples
    --------
    >>> result = validate("{title: X}\\n{key: G}\\n[G]la")
    >>> result.is_valid, result.warnings
    (True, ())
    >>> validate("{title X}").errors[0].code
    'missing-colon'
    """
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    for number, line in enumerate(preprocess(text), start=1):
        errors.extend(check_line(line, number))
        colon_issue = check_directive_syntax(line, number)
        if colon_issue is not None:
            errors.append(colon_issue)

    model = parse(text)
    open_section: DirectiveLine | None = None

    for line in model.lines:
        if isinstance(line, LyricLine):
            for match in INLINE_CHORD_RE.finditer(line.raw):
                chord = match.group(1).strip()
                if parse_chord(chord) is None:
                    warnings.append(
                        ValidationIssue(
                            line.number,
                            match.start() + 1,
                            f"Unrecognized chord '{chord}'",
                            "warning",
                            "unknown-chord",
                        )
                    )
            continue

        if not isinstance(line, DirectiveLine):
            continue

        if not is_known(line.name):
            warnings.append(
                ValidationIssue(
                    line.number,
                    None,
                    f"Unknown directive '{line.raw_name}'",
                    "warning",
                    "unknown-directive",
                )
            )
        elif line.name.startswith(START_PREFIX):
            if open_section is not None:
                warnings.append(_unclosed(open_section))
            open_section = line
        elif line.name.startswith(END_PREFIX):
            env = line.name[len(END_PREFIX) :]
            if open_section is None or open_section.name != START_PREFIX + env:
                warnings.append(
                    ValidationIssue(
                        line.number,
                        None,
                        f"'{line.name}' has no matching '{START_PREFIX}{env}'",
                        "warning",
                        "unmatched-end",
                    )
                )
                if open_section is not None:
                    warnings.append(_unclosed(open_section))
            open_section = None

    if open_section is not None:
        warnings.append(_unclosed(open_section))

    if not model.title:
        warnings.append(
            ValidationIssue(None, None, "Missing title directive", "warning", "missing-title")
        )
    if not model.key:
        warnings.append(
            ValidationIssue(None, None, "Missing key directive", "warning", "missing-key")
        )

    logger.debug(
        "Validated %d lines: %d errors, %d warnings",
        len(model.lines),
        len(errors),
        len(warnings),
    )
    return ValidationResult(
        is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings)
    )


def _unclosed(start: DirectiveLine) -> ValidationIssue:
    env = start.name[len(START_PREFIX) :]
    return ValidationIssue(
        start.number,
        None,
        f"'{start.name}' is never closed by '{END_PREFIX}{env}'",
        "warning",
        "unclosed-section",
    )
