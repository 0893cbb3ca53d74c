"""Template variable helpers: detection, script setters and substitution."""

import re
from collections.abc import Mapping

VARIABLE_PATTERN = re.compile(r"\{\{(\w+)\}\}")

# request.variables.set("name", "value") inside a < {% ... %} script block
VARIABLE_SETTER_PATTERN = re.compile(r'request\.variables\.set\("([^"]+)",\s*"([^"]+)"\)')


def detect_variables(text: str) -> list[str]:
    """Return every ``{{name}}`` referenced in the text, in first-seen order.

    The whole raw text is scanned, not just structural lines, since
    references can sit in URLs, headers or JSON bodies alike.
    """
    seen: list[str] = []
    for name in VARIABLE_PATTERN.findall(text):
        if name not in seen:
            seen.append(name)
    return seen


def find_variable_assignments(line: str) -> dict[str, str]:
    """Extract ``request.variables.set`` calls from a script line."""
    return dict(VARIABLE_SETTER_PATTERN.findall(line))


def resolve_variable(name: str, *scopes: Mapping[str, str] | None) -> str | None:
    """Look a name up in each scope in turn; the first hit wins."""
    for scope in scopes:
        if scope and name in scope:
            return scope[name]
    return None


def substitute_variables(text: str, *scopes: Mapping[str, str] | None) -> str:
    """Replace ``{{name}}`` references; unresolved ones are left as written."""

    def _replace(match: re.Match) -> str:
        value = resolve_variable(match.group(1), *scopes)
        return match.group(0) if value is None else value

    return VARIABLE_PATTERN.sub(_replace, text)
