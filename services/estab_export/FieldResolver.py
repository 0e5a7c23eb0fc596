"""Flattens hit field values into ordered lists of text values."""

from decimal import Decimal
from enum import Enum
from typing import Any

from shared.clients.search.models.Hit import Hit
from shared.models.config import ExportConfig
from shared.models.errors import UnsupportedFieldTypeError

SCORE_PRECISION = 6


class FieldValueKind(str, Enum):
    NULL = "null"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    UNSUPPORTED = "unsupported"


def classify(value: Any) -> FieldValueKind:
    """Returns the kind of a decoded JSON value."""
    if value is None:
        return FieldValueKind.NULL
    # bool is a subclass of int, so it has to be checked first
    if isinstance(value, bool):
        return FieldValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return FieldValueKind.NUMBER
    if isinstance(value, str):
        return FieldValueKind.STRING
    if isinstance(value, list):
        return FieldValueKind.ARRAY
    return FieldValueKind.UNSUPPORTED


def format_number(value: int | float, precision: int) -> str:
    """Fixed-point rendering with `precision` decimals.

    A negative precision gives the shortest decimal that reads back to the
    same float, never in exponent notation.

    Raises:
        OverflowError: If an integer is too large for a float.
    """
    number = float(value)
    if precision >= 0:
        return f"{number:.{precision}f}"
    return format(Decimal(repr(number)).normalize(), "f")


class FieldResolver:
    """Resolves one requested field of a hit into rendered text values."""

    def __init__(self, config: ExportConfig) -> None:
        self._null_value = config.null_value
        self._zero_as_null = config.zero_as_null
        self._precision = config.precision
        self._reserved = {
            "_id": lambda hit: hit.id,
            "_index": lambda hit: hit.index,
            "_type": lambda hit: hit.type,
            "_score": lambda hit: format_number(hit.score or 0.0, SCORE_PRECISION),
        }

    def resolve(self, hit: Hit, field_name: str) -> list[str]:
        """Resolve a field of a hit.

        Args:
            hit (Hit): The search result.
            field_name (str): A field name, or one of _id, _index, _type, _score.

        Returns:
            list[str]: The rendered values in backend order. May be empty.

        Raises:
            UnsupportedFieldTypeError: If the value or one of its elements is an object or a nested array.
        """
        if field_name in self._reserved:
            return [self._reserved[field_name](hit)]

        value = hit.field_values.get(field_name)
        kind = classify(value)
        if kind == FieldValueKind.NULL:
            return [self._null_value]
        if kind == FieldValueKind.ARRAY:
            rendered = []
            for element in value:
                text = self._render_scalar(field_name, element)
                if text is not None:
                    rendered.append(text)
            return rendered
        if kind in (FieldValueKind.STRING, FieldValueKind.NUMBER, FieldValueKind.BOOLEAN):
            return [self._render_scalar(field_name, value)]
        raise UnsupportedFieldTypeError(field_name, value)

    def _render_scalar(self, field_name: str, value: Any) -> str | None:
        """Render one array element. Null elements render as None and are dropped."""
        kind = classify(value)
        if kind == FieldValueKind.NULL:
            return None
        if kind == FieldValueKind.STRING:
            if value == "" and self._zero_as_null:
                return self._null_value
            return value
        if kind == FieldValueKind.NUMBER:
            try:
                return format_number(value, self._precision)
            except OverflowError as e:
                raise UnsupportedFieldTypeError(field_name, value) from e
        if kind == FieldValueKind.BOOLEAN:
            return "true" if value else "false"
        raise UnsupportedFieldTypeError(field_name, value)
