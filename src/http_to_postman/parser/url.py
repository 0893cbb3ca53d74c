"""Decompose raw request URLs into Postman URL objects."""

from collections.abc import Mapping

from .base import QueryParam, Url, Variable
from .variables import VARIABLE_PATTERN, resolve_variable

BASE_URL_TOKENS = ("{{baseUrl}}", "{{baseURL}}")


def parse_url(
    raw: str,
    local_variables: Mapping[str, str] | None = None,
    request_variables: Mapping[str, str] | None = None,
) -> Url:
    """Split a raw URL into protocol, host segments, path segments and query.

    A URL built on a ``{{baseUrl}}`` variable keeps the variable as its
    only host segment, and ``{{var}}`` tokens in the path become ``:var``
    path parameters.
    """
    url = Url(raw=raw, query=parse_query(raw) or None)
    path_part = raw.split("?", 1)[0]

    for token in BASE_URL_TOKENS:
        if token in path_part:
            _parse_templated_path(url, token, path_part, local_variables, request_variables)
            return url

    if "://" in path_part:
        url.protocol, remainder = path_part.split("://", 1)
        components = remainder.split("/")
        url.host = components[0].split(".")
        if len(components) > 1:
            url.path = components[1:]
    else:
        url.host = path_part.split("/")[0].split(".")
    return url


def _parse_templated_path(
    url: Url,
    token: str,
    path_part: str,
    local_variables: Mapping[str, str] | None,
    request_variables: Mapping[str, str] | None,
) -> None:
    url.host = [token]
    segments = [s for s in path_part.split(token, 1)[1].split("/") if s]

    path: list[str] = []
    variables: dict[str, Variable] = {}
    for segment in segments:
        for name in VARIABLE_PATTERN.findall(segment):
            segment = segment.replace(f"{{{{{name}}}}}", f":{name}")
            if name not in variables:
                value = resolve_variable(name, request_variables, local_variables) or ""
                variables[name] = Variable(key=name, value=value)
        path.append(segment)

    url.path = path or None
    url.variables = list(variables.values()) or None


def parse_query(raw: str) -> list[QueryParam]:
    """Parse the query string of a raw URL, keeping parameter order.

    Pairs without ``=`` are skipped.
    """
    if "?" not in raw:
        return []
    params = []
    for pair in raw.split("?", 1)[1].split("&"):
        if "=" not in pair:
            continue
        key, _, value = pair.partition("=")
        params.append(QueryParam(key=key.strip(), value=value.strip()))
    return params
