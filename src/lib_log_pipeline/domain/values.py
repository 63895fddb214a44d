"""Value-kind tagging for the open ``context`` and ``meta`` mappings.

Context and metadata stay open ``str -> Any`` mappings so middleware can add
whatever it needs; formatters and serialisers branch on :class:`ValueKind`
instead of sprinkling ``isinstance`` checks across adapters.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ValueKind(Enum):
    """Stable classification of a context or meta value."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    STRUCTURED = "structured"

    @classmethod
    def of(cls, value: Any) -> "ValueKind":
        """Return the kind of ``value``.

        Examples
        --------
        >>> ValueKind.of(True) is ValueKind.BOOLEAN
        True
        >>> ValueKind.of(3.5) is ValueKind.NUMBER
        True
        >>> ValueKind.of({"a": 1}) is ValueKind.STRUCTURED
        True
        """
        if value is None:
            return cls.NULL
        # bool must be checked before int, it is a subclass
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, (int, float)):
            return cls.NUMBER
        if isinstance(value, str):
            return cls.STRING
        return cls.STRUCTURED

    @property
    def is_scalar(self) -> bool:
        return self is not ValueKind.STRUCTURED


__all__ = ["ValueKind"]
