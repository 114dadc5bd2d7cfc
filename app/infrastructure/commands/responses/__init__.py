"""Platform-agnostic response models."""

from infrastructure.commands.responses.models import (
    ERROR_COLOR,
    HELP_COLOR,
    SUCCESS_COLOR,
    ErrorMessage,
    Notice,
    SuccessMessage,
)

__all__ = [
    "ERROR_COLOR",
    "HELP_COLOR",
    "SUCCESS_COLOR",
    "ErrorMessage",
    "Notice",
    "SuccessMessage",
]
