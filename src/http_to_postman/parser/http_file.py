"""JetBrains HTTP client (.http) request file parser.

Scans the text line by line and folds every classified line into the
request currently being built. Requests are sealed on ``###``
separators, on group declarations and at end of input.
"""

import re
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel

from http_to_postman.environment import DEFAULT_ENV_NAME

from .base import Body, Group, Header, Item, Request, Url
from .lines import LEGACY_LINE_RULES, LINE_RULES, LineKind, ParserState, classify
from .url import parse_url
from .variables import find_variable_assignments, substitute_variables

JSON_BODY_OPTIONS = {"raw": {"language": "json"}}


class RequestDraft(BaseModel):
    """The request being built from the lines read since the last seal."""

    method: str = ""
    url: Url | None = None
    headers: list[Header] = []
    body: Body | None = None
    body_lines: list[str] = []
    brace_depth: int = 0
    name: str | None = None
    description: str | None = None
    script_variables: dict[str, str] = {}

    @property
    def sealable(self) -> bool:
        return bool(self.method and self.url and self.url.raw)


class ParseResult(BaseModel):
    items: list[Item] = []
    groups: list[Group] = []
    grouping_used: bool = False
    local_variables: dict[str, str] = {}
    warnings: list[str] = []

    @property
    def request_count(self) -> int:
        return len(self.items) + sum(len(g.items) for g in self.groups)


def split_lines(text: str) -> list[str]:
    """Split on line feeds only, dropping a trailing carriage return per line.

    Other Unicode line boundaries (U+2028, form feed and so on) may sit
    inside JSON strings and stay part of their line.
    """
    lines = [line.removesuffix("\r") for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def join_body_lines(lines: list[str]) -> str:
    """Rebuild a JSON body; only the first and last lines are trimmed."""
    lines = list(lines)
    while len(lines) > 1 and not lines[-1].strip():
        lines.pop()
    if not lines:
        return ""
    if len(lines) == 1:
        return lines[0].strip()
    return "\n".join([lines[0].strip(), *lines[1:-1], lines[-1].strip()])


def brace_delta(line: str) -> int:
    """Net change in ``{}`` nesting on a line, ignoring braces in JSON strings."""
    delta = 0
    in_string = False
    escaped = False
    for char in line:
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = in_string
        elif char == '"':
            in_string = not in_string
        elif not in_string and char == "{":
            delta += 1
        elif not in_string and char == "}":
            delta -= 1
    return delta


class HttpFileParser:
    """Parses the text of a .http file into sealed requests and groups."""

    def __init__(
        self,
        environment: Mapping[str, Mapping[str, str]] | None = None,
        env_name: str = DEFAULT_ENV_NAME,
        legacy: bool = False,
        substitute_variables: bool = False,
    ):
        self.environment = environment
        self.env_name = env_name
        self.rules = LEGACY_LINE_RULES if legacy else LINE_RULES
        self.substitute = substitute_variables

    def parse(self, text: str) -> ParseResult:
        """Parse a whole document. Each call starts from a clean state."""
        return _ParseRun(self).run(text)


class _ParseRun:
    """State for a single pass over one document."""

    def __init__(self, parser: HttpFileParser):
        self.parser = parser
        self.result = ParseResult()
        self.state = ParserState.IDLE
        self.resume_state = ParserState.IDLE
        self.draft = RequestDraft()
        self.group: Group | None = None
        self.unnamed_count = 0
        self.line_number = 0
        self.handlers = {
            LineKind.BLANK: self._skip,
            LineKind.COMMENT: self._skip,
            LineKind.GROUP: self._on_group,
            LineKind.NAME: self._on_name,
            LineKind.DESCRIPTION: self._on_description,
            LineKind.LOCAL_VARIABLE: self._on_local_variable,
            LineKind.SCRIPT_START: self._on_script_start,
            LineKind.SCRIPT_END: self._on_script_end,
            LineKind.SCRIPT_BODY: self._on_script_body,
            LineKind.SEPARATOR: self._on_separator,
            LineKind.METHOD: self._on_method,
            LineKind.BODY_START: self._on_body_start,
            LineKind.BODY_LINE: self._on_body_line,
            LineKind.HEADER: self._on_header,
            LineKind.UNKNOWN: self._on_unknown,
        }

    def run(self, text: str) -> ParseResult:
        for number, raw_line in enumerate(split_lines(text), start=1):
            self.line_number = number
            line = raw_line.strip()
            kind, match = classify(line, self.state, self.parser.rules)
            self.handlers[kind](line, match, raw_line)

        self._seal()
        self._close_group()
        return self.result

    def _warn(self, message: str) -> None:
        self.result.warnings.append(f"line {self.line_number}: {message}")

    # -- sealing ---------------------------------------------------------------

    def _seal(self) -> None:
        """Finish the draft if it holds a method and URL, then start a new one."""
        draft = self.draft
        if draft.sealable:
            body = draft.body if draft.body is not None else Body()
            if draft.body is not None and body.raw is None:
                body.raw = join_body_lines(draft.body_lines) or None
                self._warn("JSON body was not closed before the request ended")

            if draft.name:
                name = draft.name
            else:
                self.unnamed_count += 1
                name = f"request-{self.unnamed_count}"

            item = Item(
                name=name,
                description=draft.description,
                request=Request(method=draft.method, headers=draft.headers, body=body, url=draft.url),
            )
            if self.result.grouping_used and self.group is not None:
                self.group.items.append(item)
            else:
                self.result.items.append(item)

        self.draft = RequestDraft()
        self.state = ParserState.IDLE

    def _close_group(self) -> None:
        if self.group is not None and self.group.items:
            self.result.groups.append(self.group)
        self.group = None

    # -- handlers --------------------------------------------------------------

    def _skip(self, line: str, match: re.Match | None, raw_line: str) -> None:
        pass

    def _on_unknown(self, line: str, match: re.Match | None, raw_line: str) -> None:
        self._warn(f"skipped unrecognized line {line!r}")

    def _on_group(self, line: str, match: re.Match, raw_line: str) -> None:
        if self.draft.sealable:
            self._seal()
        self._close_group()
        self.group = Group(name=match.group(1).strip())
        self.result.grouping_used = True

    def _on_name(self, line: str, match: re.Match, raw_line: str) -> None:
        self.draft.name = match.group(1).strip()

    def _on_description(self, line: str, match: re.Match, raw_line: str) -> None:
        self.draft.description = match.group(1).strip()

    def _on_local_variable(self, line: str, match: re.Match, raw_line: str) -> None:
        self.result.local_variables[match.group(1)] = match.group(2).strip()

    def _on_script_start(self, line: str, match: re.Match, raw_line: str) -> None:
        self.draft.script_variables.update(find_variable_assignments(line))
        if "%}" not in line:
            self.resume_state = self.state
            self.state = ParserState.IN_SCRIPT_BLOCK

    def _on_script_end(self, line: str, match: re.Match, raw_line: str) -> None:
        self.draft.script_variables.update(find_variable_assignments(line))
        self.state = self.resume_state

    def _on_script_body(self, line: str, match: re.Match, raw_line: str) -> None:
        self.draft.script_variables.update(find_variable_assignments(line))

    def _on_separator(self, line: str, match: re.Match, raw_line: str) -> None:
        self._seal()
        upcoming = match.group(1).strip() if match.groups() else ""
        if upcoming:
            self.draft.name = upcoming

    def _on_method(self, line: str, match: re.Match, raw_line: str) -> None:
        draft = self.draft
        draft.method = match.group(1)
        draft.url = parse_url(match.group(2), self.result.local_variables, draft.script_variables)
        if self.state == ParserState.IDLE:
            self.state = ParserState.IN_HEADERS

    def _on_body_start(self, line: str, match: re.Match, raw_line: str) -> None:
        draft = self.draft
        draft.body = Body(mode="raw", options=JSON_BODY_OPTIONS)
        if line.endswith("}"):
            draft.body.raw = line
            self.state = ParserState.IN_HEADERS
            return
        draft.body_lines = [raw_line]
        draft.brace_depth = brace_delta(line)
        self.state = ParserState.IN_JSON_BODY

    def _on_body_line(self, line: str, match: re.Match, raw_line: str) -> None:
        draft = self.draft
        draft.body_lines.append(raw_line)
        draft.brace_depth += brace_delta(line)
        if draft.brace_depth <= 0 and line.endswith("}"):
            draft.body.raw = join_body_lines(draft.body_lines)
            self.state = ParserState.IN_HEADERS

    def _on_header(self, line: str, match: re.Match, raw_line: str) -> None:
        draft = self.draft
        key, value = match.group(1).strip(), match.group(2).strip()
        if draft.body is not None:
            self._warn(f"ignored header {key!r} after the request body")
            return
        if not key:
            self._warn(f"skipped header line without a name {line!r}")
            return

        if self.parser.substitute:
            scopes = (draft.script_variables, self.result.local_variables, self._environment_values())
            key = substitute_variables(key, *scopes)
            value = substitute_variables(value, *scopes)
        draft.headers.append(Header(key=key, value=value))

    def _environment_values(self) -> Mapping[str, str] | None:
        if not self.parser.environment:
            return None
        return self.parser.environment.get(self.parser.env_name)


def parse_http_file(file_path: Path, **options) -> ParseResult:
    """Parse a .http file from disk; options go to ``HttpFileParser``."""
    text = file_path.read_text(encoding="utf-8-sig")
    return HttpFileParser(**options).parse(text)
