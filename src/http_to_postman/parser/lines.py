"""Line classification for .http request files.

Every trimmed line maps to exactly one ``LineKind``. The rules are an
ordered table and the first match wins; a rule may be limited to the
parser states in which it applies. While a multi-line script block or
a JSON body is open, the rules for that state come before anything
they could be mistaken for.
"""

import re
from enum import Enum
from typing import NamedTuple

from .base import HttpMethod


class ParserState(str, Enum):
    IDLE = "idle"
    IN_HEADERS = "in_headers"
    IN_JSON_BODY = "in_json_body"
    IN_SCRIPT_BLOCK = "in_script_block"


class LineKind(str, Enum):
    BLANK = "blank"
    GROUP = "group"
    NAME = "name"
    DESCRIPTION = "description"
    LOCAL_VARIABLE = "local_variable"
    SCRIPT_START = "script_start"
    SCRIPT_END = "script_end"
    SCRIPT_BODY = "script_body"
    SEPARATOR = "separator"
    COMMENT = "comment"
    METHOD = "method"
    BODY_START = "body_start"
    BODY_LINE = "body_line"
    HEADER = "header"
    UNKNOWN = "unknown"


class LineRule(NamedTuple):
    kind: LineKind
    pattern: re.Pattern
    states: frozenset[ParserState] | None = None  # None: any state


_METHODS = "|".join(m.value for m in HttpMethod)

# Blank lines inside an open JSON body fall through to BODY_LINE.
_BLANK = LineRule(
    LineKind.BLANK,
    re.compile(r"^$"),
    frozenset({ParserState.IDLE, ParserState.IN_HEADERS, ParserState.IN_SCRIPT_BLOCK}),
)
_SCRIPT_END = LineRule(LineKind.SCRIPT_END, re.compile(r"%\}"), frozenset({ParserState.IN_SCRIPT_BLOCK}))
_SCRIPT_BODY = LineRule(LineKind.SCRIPT_BODY, re.compile(r""), frozenset({ParserState.IN_SCRIPT_BLOCK}))
_GROUP = LineRule(LineKind.GROUP, re.compile(r"^#\s*@group_name\s+(.+)$"))
_NAME = LineRule(LineKind.NAME, re.compile(r"^#\s*@name\s+(\S.*)$"))
_DESCRIPTION = LineRule(LineKind.DESCRIPTION, re.compile(r"^//\s*(.+)$"))
_LOCAL_VARIABLE = LineRule(LineKind.LOCAL_VARIABLE, re.compile(r"^@(\w+)\s*=\s*(.+)$"))
_SCRIPT_START = LineRule(LineKind.SCRIPT_START, re.compile(r"^<.*\{%"))
_SEPARATOR = LineRule(LineKind.SEPARATOR, re.compile(r"^###\s*(.*)$"))
_LEGACY_SEPARATOR = LineRule(LineKind.SEPARATOR, re.compile(r"^###"))
_COMMENT = LineRule(LineKind.COMMENT, re.compile(r"^#"))
_BODY_LINE = LineRule(LineKind.BODY_LINE, re.compile(r""), frozenset({ParserState.IN_JSON_BODY}))
_METHOD = LineRule(LineKind.METHOD, re.compile(rf"^({_METHODS})\s+(\S+)"))
_BODY_START = LineRule(LineKind.BODY_START, re.compile(r"^\{"))
_HEADER = LineRule(LineKind.HEADER, re.compile(r"^([^:]*):(.*)$"))

LINE_RULES: tuple[LineRule, ...] = (
    _BLANK,
    _SCRIPT_END,
    _SCRIPT_BODY,
    _GROUP,
    _NAME,
    _DESCRIPTION,
    _LOCAL_VARIABLE,
    _SCRIPT_START,
    _SEPARATOR,
    _COMMENT,
    _BODY_LINE,
    _METHOD,
    _BODY_START,
    _HEADER,
)

# Plain request/header/body grammar: no groups, names, descriptions,
# local variables or scripts, and separators never carry a name.
LEGACY_LINE_RULES: tuple[LineRule, ...] = (
    _BLANK,
    _LEGACY_SEPARATOR,
    _COMMENT,
    _BODY_LINE,
    _METHOD,
    _BODY_START,
    _HEADER,
)


def classify(
    line: str,
    state: ParserState,
    rules: tuple[LineRule, ...] = LINE_RULES,
) -> tuple[LineKind, re.Match | None]:
    """Return the kind of a trimmed line and the match of the rule that fired."""
    for rule in rules:
        if rule.states is not None and state not in rule.states:
            continue
        match = rule.pattern.search(line)
        if match:
            return rule.kind, match
    return LineKind.UNKNOWN, None
