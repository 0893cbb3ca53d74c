"""Collection generator: assembles parsed requests into a Postman collection."""

from collections.abc import Mapping
from datetime import datetime

from http_to_postman.environment import DEFAULT_ENV_NAME
from http_to_postman.parser.base import Collection, Info, Item, Variable
from http_to_postman.parser.http_file import ParseResult

POSTMAN_SCHEMA = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"
COLLECTION_NAME_PREFIX = "jb-export-"
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def build_variables(
    detected: list[str],
    local_variables: Mapping[str, str],
    environment: Mapping[str, Mapping[str, str]] | None,
    env_name: str,
) -> list[Variable]:
    """Collection variables: every detected name once, then unused local ones.

    A detected name takes its value from the local declarations first,
    then from the active environment, and falls back to an empty string.
    """
    env_values = (environment or {}).get(env_name) or {}
    variables: list[Variable] = []
    seen: set[str] = set()

    for name in detected:
        if name in seen:
            continue
        seen.add(name)
        if name in local_variables:
            value = local_variables[name]
        else:
            value = env_values.get(name, "")
        variables.append(Variable(key=name, value=value))

    for name, value in local_variables.items():
        if name not in seen:
            variables.append(Variable(key=name, value=value))
    return variables


def _valid_requests(items: list[Item]) -> list[Item]:
    return [item for item in items if item.request is not None and item.request.method]


def build_items(result: ParseResult) -> list[Item]:
    """Top-level items: request folders when grouping is used, else a flat list."""
    items = _valid_requests(result.items)
    if not result.grouping_used:
        return items

    for group in result.groups:
        requests = _valid_requests(group.items)
        if requests:
            items.append(Item(name=group.name, items=requests))
    return items


def build_collection(
    result: ParseResult,
    detected: list[str],
    environment: Mapping[str, Mapping[str, str]] | None = None,
    env_name: str = DEFAULT_ENV_NAME,
    now: datetime | None = None,
) -> Collection:
    now = now or datetime.now()
    return Collection(
        info=Info(name=f"{COLLECTION_NAME_PREFIX}{now.strftime(TIMESTAMP_FORMAT)}", schema_url=POSTMAN_SCHEMA),
        items=build_items(result),
        variables=build_variables(detected, result.local_variables, environment, env_name),
    )
