"""Error definitions for imgbuilder."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_INPUT_READ = "E_INPUT_READ"
E_LIST_FILE = "E_LIST_FILE"
E_NAME_TOO_LONG = "E_NAME_TOO_LONG"
E_NAME_EMPTY = "E_NAME_EMPTY"
E_VALUE_RANGE = "E_VALUE_RANGE"
E_WRITE_IO = "E_WRITE_IO"
E_INTERNAL = "E_INTERNAL"


@dataclass
class ImgError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class InputError(ImgError):
    pass


class LayoutError(ImgError):
    pass


class OutputError(ImgError):
    pass


def internal_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> ImgError:
    return ImgError(code=E_INTERNAL, message=message, context=context)


__all__ = [
    "ImgError",
    "InputError",
    "LayoutError",
    "OutputError",
    "internal_error",
    "E_INPUT_READ",
    "E_LIST_FILE",
    "E_NAME_TOO_LONG",
    "E_NAME_EMPTY",
    "E_VALUE_RANGE",
    "E_WRITE_IO",
    "E_INTERNAL",
]
