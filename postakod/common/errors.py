"""Domain errors and failure typing."""


class DirectoryError(Exception):
    """Base class for postal-code directory failures."""

    error_code = "DIRECTORY_ERROR"


class ConfigError(DirectoryError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class InvalidInputError(DirectoryError):
    """Raised when a caller passes an empty name, malformed postal code or bad bound."""

    error_code = "INVALID_INPUT"


class ContractError(DirectoryError):
    """Raised when strict output contracts are broken."""

    error_code = "CONTRACT_ERROR"


class StageError(DirectoryError):
    """Raised for import or repair failures that should halt the command."""

    error_code = "STAGE_ERROR"
