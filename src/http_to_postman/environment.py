"""Loader for the HTTP client environment file (http-client.env.json).

The file maps environment names to variable tables:
``{"dev": {"baseUrl": "http://localhost:8080"}, "prod": {...}}``.
"""

from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from http_to_postman.errors import EnvironmentFileError

ENV_FILENAME = "http-client.env.json"
DEFAULT_ENV_NAME = "dev"

Environment = dict[str, dict[str, str]]

_environment_adapter = TypeAdapter(Environment)


def environment_path_for(input_path: Path) -> Path:
    """The environment file that sits beside a request file."""
    return input_path.parent / ENV_FILENAME


def load_environment(env_path: Path) -> Environment:
    """Load and validate an environment file."""
    try:
        text = env_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise EnvironmentFileError(f"cannot read {env_path}: {e}") from e

    try:
        return _environment_adapter.validate_json(text)
    except ValidationError as e:
        raise EnvironmentFileError(f"failed to parse {env_path.name}: {e.errors()[0]['msg']}") from e
