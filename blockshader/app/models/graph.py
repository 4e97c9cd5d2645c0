from __future__ import annotations

from typing import Annotated, Literal
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, Field, field_validator

from blockshader.app.models.block import ValueType

CONNECTION_SEPARATOR = ":"
MAX_GRAPH_INSTANCES = 500
SAFE_EXPRESSION_PATTERN = r"^[-+*/(). 0-9a-zA-Z_]+$"
GLSL_IDENTIFIER_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"
INSTANCE_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


class LiteralValue(BaseModel):
    kind: Literal["literal"] = "literal"
    value: float = Field(allow_inf_nan=False)


class VectorValue(BaseModel):
    kind: Literal["vector"] = "vector"
    values: list[Annotated[float, Field(allow_inf_nan=False)]] = Field(min_length=2, max_length=4)


class VariableRef(BaseModel):
    kind: Literal["variable"] = "variable"
    name: str = Field(min_length=1, pattern=SAFE_EXPRESSION_PATTERN)


class ConnectionRef(BaseModel):
    kind: Literal["connection"] = "connection"
    source_instance_id: str = Field(min_length=1)
    source_port_id: str = Field(min_length=1)


PortValue = Annotated[
    LiteralValue | VectorValue | VariableRef | ConnectionRef,
    Field(discriminator="kind"),
]


def coerce_port_value(value: object) -> object:
    """Map the untagged wire forms onto the tagged port value shapes.

    Numbers become literals, sequences become vectors, ``"<block>:<port>"``
    strings become connections (text after a second ``:`` is dropped) and any
    other string is a free variable.
    Tagged dicts and model instances pass through untouched.
    """
    if isinstance(value, BaseModel | dict):
        return value
    if isinstance(value, bool):
        return {"kind": "literal", "value": 1.0 if value else 0.0}
    if isinstance(value, int | float):
        return {"kind": "literal", "value": value}
    if isinstance(value, list | tuple):
        return {"kind": "vector", "values": list(value)}
    if isinstance(value, str):
        if CONNECTION_SEPARATOR in value:
            source_instance_id, source_port_id = value.split(CONNECTION_SEPARATOR)[:2]
            return {
                "kind": "connection",
                "source_instance_id": source_instance_id,
                "source_port_id": source_port_id,
            }
        return {"kind": "variable", "name": value}
    raise ValueError(f"Unsupported port value '{value!r}'")


class BlockPosition(BaseModel):
    x: float = 0.0
    y: float = 0.0


class BlockInstance(BaseModel):
    id: str = Field(min_length=1, pattern=INSTANCE_ID_PATTERN)
    kind_id: str = Field(min_length=1, validation_alias=AliasChoices("kind_id", "blockType"))
    input_values: dict[str, PortValue] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("input_values", "inputValues"),
    )
    position: BlockPosition = Field(default_factory=BlockPosition)

    @field_validator("input_values", mode="before")
    @classmethod
    def coerce_untagged_values(cls, value: object) -> object:
        if isinstance(value, dict):
            return {port_id: coerce_port_value(item) for port_id, item in value.items()}
        return value

    def connections(self) -> list[tuple[str, ConnectionRef]]:
        return [
            (port_id, value)
            for port_id, value in self.input_values.items()
            if isinstance(value, ConnectionRef)
        ]


class BlockConnection(BaseModel):
    id: str = Field(min_length=1)
    from_instance_id: str = Field(min_length=1)
    from_port_id: str = Field(min_length=1)
    to_instance_id: str = Field(min_length=1)
    to_port_id: str = Field(min_length=1)
    value_type: ValueType | None = None


UniformValue = float | list[float]


class DynamicUniform(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(min_length=1, pattern=GLSL_IDENTIFIER_PATTERN)
    type: ValueType = ValueType.FLOAT
    value: UniformValue = 0.0
    min: float = 0.0
    max: float = 1.0
    step: float = 0.01


class BlockGraph(BaseModel):
    instances: list[BlockInstance] = Field(default_factory=list)
    uniforms: list[DynamicUniform] = Field(default_factory=list)

    @field_validator("instances")
    @classmethod
    def validate_instance_count(cls, instances: list[BlockInstance]) -> list[BlockInstance]:
        if len(instances) > MAX_GRAPH_INSTANCES:
            raise ValueError(f"Block graph exceeds maximum instance count ({MAX_GRAPH_INSTANCES})")
        return instances
