"""
Parameter extraction for step targets and descriptions.

Descriptions double as data carriers for type, fill, selectOption and
checkText. The value is the first quoted run in the description whose opening
quote is not glued to a preceding word character::

    description := <prefix> QUOTE <value> QUOTE <suffix>
    QUOTE       := "'" | '"'   (opening and closing quote must match)
    value       := one or more characters other than the opening quote

An apostrophe inside a word ("user's") never opens a value, so
``Fill the user's email with 'a@b.co'`` yields ``a@b.co``. An apostrophe
inside the value itself needs the other quote kind: ``Fill "it's"``.

A description without a quoted run yields ``None`` and each action decides
what that means.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from testpilot.error_handling.exceptions import StepParameterError

_QUOTED_RE = re.compile(r"""(?<!\w)(["'])((?:(?!\1).)+)\1""", re.DOTALL)
_TIMEOUT_RE = re.compile(r"^\s*(\d+)\s*$")
_VIEWPORT_RE = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")


@dataclass(frozen=True)
class QuotedText:
    """A description split around its first quoted value."""

    prefix: str
    value: str
    suffix: str
    quote: str


def parse_quoted_text(description: Optional[str]) -> Optional[QuotedText]:
    """Split a description into prefix, quoted value and suffix."""
    if not description:
        return None

    match = _QUOTED_RE.search(description)
    if match is None:
        return None

    return QuotedText(
        prefix=description[: match.start()],
        value=match.group(2),
        suffix=description[match.end():],
        quote=match.group(1),
    )


def redact_quoted_text(description: Optional[str]) -> str:
    """Description safe for logs: the quoted value is replaced by its length."""
    quoted = parse_quoted_text(description)
    if quoted is None:
        return description or ""
    return f"{quoted.prefix}<{len(quoted.value)} chars>{quoted.suffix}"


def parse_timeout_ms(target: str) -> int:
    """Parse a waitForTimeout target as a non-negative number of milliseconds."""
    match = _TIMEOUT_RE.match(target or "")
    if match is None:
        raise StepParameterError(
            f"Invalid timeout value: {target}",
            action="waitForTimeout",
            value=target,
        )
    return int(match.group(1))


def parse_viewport(target: str) -> Tuple[int, int]:
    """Parse a ``WIDTHxHEIGHT`` target into positive integer dimensions."""
    match = _VIEWPORT_RE.match(target or "")
    if match is not None:
        width, height = int(match.group(1)), int(match.group(2))
        if width > 0 and height > 0:
            return width, height

    raise StepParameterError(
        f'Invalid viewport format: {target}. Expected "widthxheight".',
        action="setViewport",
        value=target,
    )
