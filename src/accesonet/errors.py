"""Failure values returned across the public core operations."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    DECODE_ERROR = "decode_error"
    ASSET_MISSING = "asset_missing"
    CLASSIFY_ERROR = "classify_error"


@dataclass(frozen=True)
class Failure:
    """An explicit failure result carrying its kind and underlying cause."""

    kind: ErrorKind
    message: str
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        return self.message

