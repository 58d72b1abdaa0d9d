"""Shape descriptions: declarative structural contracts for model output.

The same shape drives three things: the schema constraint sent to Gemini,
validation of the returned payload, and (de)serialization of the contract
itself (shapes are plain pydantic models).
"""
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class StringShape(BaseModel):
    """A string, optionally restricted to a fixed set of values."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["string"] = "string"
    enum: tuple[str, ...] | None = None
    description: str | None = None


class NumberShape(BaseModel):
    """Any real number (ints and floats, never booleans)."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["number"] = "number"
    description: str | None = None


class IntegerShape(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["integer"] = "integer"
    description: str | None = None


class BooleanShape(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["boolean"] = "boolean"
    description: str | None = None


class ArrayShape(BaseModel):
    """A homogeneous array whose elements all match `items`."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["array"] = "array"
    items: "Shape"
    min_items: int | None = None
    description: str | None = None


class ObjectShape(BaseModel):
    """An object with named properties; names in `required` must be present."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["object"] = "object"
    properties: dict[str, "Shape"] = Field(default_factory=dict)
    required: tuple[str, ...] = ()
    description: str | None = None


Shape = Annotated[
    Union[StringShape, NumberShape, IntegerShape, BooleanShape, ArrayShape, ObjectShape],
    Field(discriminator="kind"),
]

ArrayShape.model_rebuild()
ObjectShape.model_rebuild()


def obj(properties: dict, required: list[str] | None = None, description: str | None = None) -> ObjectShape:
    """Shorthand for an object shape; every property is required by default."""
    if required is None:
        required = list(properties)
    return ObjectShape(properties=properties, required=tuple(required), description=description)


def array(items, min_items: int | None = None) -> ArrayShape:
    """Shorthand for an array shape."""
    return ArrayShape(items=items, min_items=min_items)
