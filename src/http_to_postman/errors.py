"""Errors raised while converting a request file into a collection."""


class ConversionError(Exception):
    """Base class for failures that abort a conversion."""


class InputFileError(ConversionError):
    """The input request file is missing or unreadable."""


class EnvironmentFileError(ConversionError):
    """The environment file is missing, unreadable or malformed."""


class MissingEnvironmentError(ConversionError):
    """Variables are referenced but no usable environment file was found."""

    def __init__(self, variables: list[str], cause: EnvironmentFileError):
        self.variables = variables
        self.cause = cause
        names = ", ".join(variables)
        super().__init__(f"variables found in input file ({names}) but the environment file is missing or invalid: {cause}")


class OutputWriteError(ConversionError):
    """The collection document could not be written."""
