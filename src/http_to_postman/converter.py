"""Converter — turns a .http request file into a Postman collection file."""

from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel

from http_to_postman.environment import (
    DEFAULT_ENV_NAME,
    Environment,
    environment_path_for,
    load_environment,
)
from http_to_postman.errors import (
    EnvironmentFileError,
    InputFileError,
    MissingEnvironmentError,
    OutputWriteError,
)
from http_to_postman.generator.collection import build_collection
from http_to_postman.parser.base import Collection
from http_to_postman.parser.http_file import HttpFileParser
from http_to_postman.parser.variables import detect_variables


class ConversionResult(BaseModel):
    collection: Collection
    variables: list[str]
    warnings: list[str] = []
    request_count: int = 0


class CollectionConverter:
    """Runs the prescan, parse and assembly stages for one input at a time."""

    def __init__(
        self,
        env_name: str = DEFAULT_ENV_NAME,
        env_file: Path | None = None,
        legacy: bool = False,
        substitute_variables: bool = False,
    ):
        self.env_name = env_name
        self.env_file = env_file
        self.legacy = legacy
        self.substitute_variables = substitute_variables

    def convert(
        self,
        text: str,
        environment: Mapping[str, Mapping[str, str]] | None = None,
        now: datetime | None = None,
        variables: list[str] | None = None,
    ) -> ConversionResult:
        """Convert request file text into a collection. No file access.

        ``variables`` is the prescan result when the caller already has it.
        """
        if variables is None:
            variables = detect_variables(text)
        parser = HttpFileParser(
            environment=environment,
            env_name=self.env_name,
            legacy=self.legacy,
            substitute_variables=self.substitute_variables,
        )
        parsed = parser.parse(text)
        collection = build_collection(parsed, variables, environment, self.env_name, now=now)
        return ConversionResult(
            collection=collection,
            variables=variables,
            warnings=parsed.warnings,
            request_count=parsed.request_count,
        )

    def convert_file(self, input_path: Path, output_path: Path, now: datetime | None = None) -> ConversionResult:
        """Convert ``input_path`` and write the collection JSON to ``output_path``."""
        try:
            text = input_path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise InputFileError(f"cannot read {input_path}: {e}") from e

        variables = detect_variables(text)
        environment = self._load_environment(input_path, variables)
        result = self.convert(text, environment, now=now, variables=variables)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(result.collection.to_json(), encoding="utf-8")
        except OSError as e:
            raise OutputWriteError(f"cannot write {output_path}: {e}") from e
        return result

    def _load_environment(self, input_path: Path, variables: list[str]) -> Environment | None:
        """The environment is only required when the file references variables."""
        env_path = self.env_file or environment_path_for(input_path)
        try:
            return load_environment(env_path)
        except EnvironmentFileError as e:
            if variables:
                raise MissingEnvironmentError(variables, e) from e
            return None
