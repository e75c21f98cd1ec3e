"""Flat value domain for resolved configuration properties.

Raw configuration data (as produced by a TOML or YAML reader) may contain
nested tables and arrays. Downstream native tooling only understands scalar
settings, so every raw value passes through to_flat_value() exactly once, at
ingestion, and the rest of fel4kit works with FlatTomlValue only.
"""

import datetime
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union

from fel4kit.core.exceptions import (
    InvalidPropertyNameError,
    UnsupportedNestedValueError,
    UnsupportedValueTypeError,
)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

DatetimeLike = Union[datetime.datetime, datetime.date, datetime.time]


class FlatValueKind(Enum):
    """Scalar kinds permitted in a resolved configuration."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATETIME = "datetime"


@dataclass(frozen=True)
class FlatTomlValue:
    """A scalar configuration value tagged with its kind.

    Use the named constructors (or to_flat_value) rather than building
    instances directly; they check the Python type of the payload.

    Attributes:
        kind: Scalar kind
        value: Python scalar (str, int, float, bool, or date/time object)
    """

    kind: FlatValueKind
    value: Any

    @classmethod
    def string(cls, value: str) -> "FlatTomlValue":
        if not isinstance(value, str):
            raise TypeError(f"Expected str, got {type(value).__name__}")
        return cls(FlatValueKind.STRING, value)

    @classmethod
    def integer(cls, value: int) -> "FlatTomlValue":
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Expected int, got {type(value).__name__}")
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError(f"Integer out of 64-bit range: {value}")
        return cls(FlatValueKind.INTEGER, value)

    @classmethod
    def float_(cls, value: float) -> "FlatTomlValue":
        if not isinstance(value, float):
            raise TypeError(f"Expected float, got {type(value).__name__}")
        return cls(FlatValueKind.FLOAT, value)

    @classmethod
    def boolean(cls, value: bool) -> "FlatTomlValue":
        if not isinstance(value, bool):
            raise TypeError(f"Expected bool, got {type(value).__name__}")
        return cls(FlatValueKind.BOOLEAN, value)

    @classmethod
    def datetime(cls, value: DatetimeLike) -> "FlatTomlValue":
        if not isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
            raise TypeError(f"Expected date/time, got {type(value).__name__}")
        return cls(FlatValueKind.DATETIME, value)

    def to_python(self) -> Any:
        """Return the wrapped Python scalar."""
        return self.value

    def to_text(self) -> str:
        """Render the value as text for native build tooling.

        Booleans become ON/OFF (CMake truth values) and datetimes use ISO 8601.
        """
        if self.kind is FlatValueKind.BOOLEAN:
            return "ON" if self.value else "OFF"
        if self.kind is FlatValueKind.DATETIME:
            return self.value.isoformat()
        return str(self.value)

    def __str__(self) -> str:
        return self.to_text()


@dataclass(frozen=True)
class FlatTomlProperty:
    """A single name/value pair whose value holds no nested structure."""

    name: str
    value: FlatTomlValue

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise InvalidPropertyNameError(None, self.name)
        if not isinstance(self.value, FlatTomlValue):
            raise TypeError(
                f"Property '{self.name}' value must be a FlatTomlValue, "
                f"got {type(self.value).__name__}"
            )


def to_flat_value(raw: Any, path: str) -> FlatTomlValue:
    """
    Convert a raw structured configuration value into a FlatTomlValue.

    Args:
        raw: Value as produced by a TOML/YAML reader
        path: Dotted property path used in error messages (e.g. "global.KernelArch")

    Returns:
        Flat value wrapping the scalar

    Raises:
        UnsupportedNestedValueError: If raw is a table or array
        UnsupportedValueTypeError: If raw is a scalar of an unsupported type
    """
    if isinstance(raw, FlatTomlValue):
        return raw
    # bool is a subclass of int, so it must be checked first
    if isinstance(raw, bool):
        return FlatTomlValue.boolean(raw)
    if isinstance(raw, int):
        if not INT64_MIN <= raw <= INT64_MAX:
            raise UnsupportedValueTypeError(path, "integer outside 64-bit range")
        return FlatTomlValue.integer(raw)
    if isinstance(raw, float):
        return FlatTomlValue.float_(raw)
    if isinstance(raw, str):
        return FlatTomlValue.string(raw)
    if isinstance(raw, (datetime.datetime, datetime.date, datetime.time)):
        return FlatTomlValue.datetime(raw)
    if isinstance(raw, (Mapping, list, tuple, set, frozenset)):
        raise UnsupportedNestedValueError(path)
    raise UnsupportedValueTypeError(path, type(raw).__name__)
