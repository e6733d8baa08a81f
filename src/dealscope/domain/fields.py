from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

FieldType = Literal[
    "string",
    "number",
    "boolean",
    "array",
    "object",
    "select",
    "date",
    "currency",
    "percentage",
]

NUMERIC_FIELD_TYPES = frozenset({"number", "currency", "percentage"})


class FieldBounds(BaseModel):
    """Declarative min/max. For arrays, `min` is the minimum item count."""

    model_config = ConfigDict(frozen=True)

    min: float | None = None
    max: float | None = None


class LegacyField(BaseModel):
    """A bare field name, as the older package definitions list them."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    kind: Literal["legacy"] = "legacy"
    name: str


class StructuredField(BaseModel):
    """A typed field with validation metadata and optional nested sub-fields."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    kind: Literal["structured"] = "structured"
    name: str
    type: FieldType
    label: str | None = None
    description: str | None = None
    required: bool = False
    bounds: FieldBounds | None = None
    options: tuple[str, ...] = ()
    sub_fields: tuple["StructuredField", ...] = ()
    default: Any = None
    unit: str | None = None
    helper_text: str | None = None


FieldSpec = Annotated[Union[LegacyField, StructuredField], Field(discriminator="kind")]


def field_name(spec: LegacyField | StructuredField) -> str:
    if spec.kind == "legacy":
        return spec.name
    elif spec.kind == "structured":
        return spec.name
    raise TypeError(f"unknown field spec kind: {spec.kind!r}")


def field_label(spec: LegacyField | StructuredField) -> str:
    if spec.kind == "structured" and spec.label:
        return spec.label
    return label_from_name(field_name(spec))


def label_from_name(name: str) -> str:
    # "purchasePrice" -> "Purchase Price", "currentNOI" -> "Current NOI"
    out: list[str] = []
    for i, ch in enumerate(name):
        prev = name[i - 1] if i else ""
        if i and ch.isupper() and not prev.isupper():
            out.append(" ")
        out.append(ch)
    label = "".join(out)
    return label[:1].upper() + label[1:]


StructuredField.model_rebuild()
