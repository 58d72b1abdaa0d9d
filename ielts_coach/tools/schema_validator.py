"""Validate raw model output against a shape description."""
import math
from typing import Any

from ielts_coach.models.shape import (
    ArrayShape,
    BooleanShape,
    IntegerShape,
    NumberShape,
    ObjectShape,
    StringShape,
)
from ielts_coach.tools.errors import SchemaViolation


def validate(shape, value: Any, path: str = "$") -> Any:
    """
    Check `value` against `shape` recursively.

    Only structure is checked: field presence and types, array elements,
    enum membership and minimum array length. Nothing is coerced, so a
    conforming value is returned exactly as given.

    Raises:
        SchemaViolation: naming the path of the first offending field,
            e.g. ``$.sections[0].questions[2].correctAnswer``.
    """
    if isinstance(shape, ObjectShape):
        _validate_object(shape, value, path)
    elif isinstance(shape, ArrayShape):
        _validate_array(shape, value, path)
    elif isinstance(shape, StringShape):
        if not isinstance(value, str):
            raise SchemaViolation(path, f"expected string, got {_type_name(value)}")
        if shape.enum is not None and value not in shape.enum:
            raise SchemaViolation(path, f"{value!r} is not one of {list(shape.enum)}")
    elif isinstance(shape, NumberShape):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SchemaViolation(path, f"expected number, got {_type_name(value)}")
        if not math.isfinite(value):
            raise SchemaViolation(path, f"expected a finite number, got {value}")
    elif isinstance(shape, IntegerShape):
        if isinstance(value, bool) or not _is_integral(value):
            raise SchemaViolation(path, f"expected integer, got {_type_name(value)}")
    elif isinstance(shape, BooleanShape):
        if not isinstance(value, bool):
            raise SchemaViolation(path, f"expected boolean, got {_type_name(value)}")
    else:
        raise TypeError(f"Unsupported shape: {shape!r}")
    return value


def _validate_object(shape: ObjectShape, value: Any, path: str) -> None:
    if not isinstance(value, dict):
        raise SchemaViolation(path, f"expected object, got {_type_name(value)}")

    for name in shape.required:
        if value.get(name) is None:
            raise SchemaViolation(f"{path}.{name}", "missing required field")

    for name, field_shape in shape.properties.items():
        # None is treated the same as an absent optional field
        if value.get(name) is None:
            continue
        validate(field_shape, value[name], f"{path}.{name}")


def _validate_array(shape: ArrayShape, value: Any, path: str) -> None:
    if not isinstance(value, list):
        raise SchemaViolation(path, f"expected array, got {_type_name(value)}")
    if shape.min_items is not None and len(value) < shape.min_items:
        raise SchemaViolation(path, f"expected at least {shape.min_items} item(s), got {len(value)}")
    for i, item in enumerate(value):
        validate(shape.items, item, f"{path}[{i}]")


def _is_integral(value: Any) -> bool:
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    return {
        bool: "boolean",
        int: "integer",
        float: "number",
        str: "string",
        list: "array",
        dict: "object",
    }.get(type(value), type(value).__name__)
