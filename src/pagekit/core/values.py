"""Tagged property values.

Page properties carry a runtime kind. Extractors return None when the kind
does not match, so callers branch explicitly on absent or mismatched values
instead of receiving a silent default.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pagekit.core.types import PageRef


class ValueKind(Enum):
    """Runtime kind of a property value."""

    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    REFERENCE = "reference"


PropertyRaw = str | int | float | datetime | bool | PageRef


@dataclass(frozen=True)
class PropertyValue:
    """Property value tagged with its kind."""

    kind: ValueKind
    raw: PropertyRaw

    @classmethod
    def of(cls, raw: PropertyRaw) -> "PropertyValue":
        """Wrap a raw value, inferring its kind.

        Raises:
            TypeError: If the value has no supported kind
        """
        # bool before int: bool is an int subclass
        if isinstance(raw, bool):
            return cls(ValueKind.BOOLEAN, raw)
        if isinstance(raw, int | float):
            return cls(ValueKind.NUMBER, raw)
        if isinstance(raw, datetime):
            return cls(ValueKind.DATE, raw)
        if isinstance(raw, PageRef):
            return cls(ValueKind.REFERENCE, raw)
        if isinstance(raw, str):
            return cls(ValueKind.STRING, raw)
        raise TypeError(f"Unsupported property value type: {type(raw).__name__}")

    def as_string(self) -> str | None:
        return self.raw if self.kind is ValueKind.STRING else None  # type: ignore[return-value]

    def as_number(self) -> int | float | None:
        return self.raw if self.kind is ValueKind.NUMBER else None  # type: ignore[return-value]

    def as_date(self) -> datetime | None:
        return self.raw if self.kind is ValueKind.DATE else None  # type: ignore[return-value]

    def as_bool(self) -> bool | None:
        return self.raw if self.kind is ValueKind.BOOLEAN else None  # type: ignore[return-value]

    def as_reference(self) -> PageRef | None:
        return self.raw if self.kind is ValueKind.REFERENCE else None  # type: ignore[return-value]

    def to_text(self) -> str:
        """Canonical string form used for string comparisons.

        Booleans render as "true"/"false", dates as ISO-8601 and
        references as their page id.
        """
        if self.kind is ValueKind.BOOLEAN:
            return "true" if self.raw else "false"
        if self.kind is ValueKind.DATE:
            return self.raw.isoformat()  # type: ignore[union-attr]
        if self.kind is ValueKind.REFERENCE:
            return str(self.raw.id)  # type: ignore[union-attr]
        return str(self.raw)
