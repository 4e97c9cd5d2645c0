from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

UV_VARIABLE = "uv"

NAME_PLACEHOLDER = "{{name}}"
ID_PLACEHOLDER = "{{id}}"
OUTPUT_TYPE_PLACEHOLDER = "{{outputType}}"

PortDefault = float | list[float] | str


class ValueType(StrEnum):
    FLOAT = "float"
    VEC2 = "vec2"
    VEC3 = "vec3"
    VEC4 = "vec4"


class BlockCategory(StrEnum):
    SHAPE = "shape"
    PATTERN = "pattern"
    COLOR = "color"
    TRANSFORM = "transform"
    BLEND = "blend"
    EFFECT = "effect"


class PortSpec(BaseModel):
    id: str = Field(min_length=1)
    label: str = Field(min_length=1)
    value_type: ValueType
    default: PortDefault | None = None

    model_config = {"frozen": True}


class BlockKind(BaseModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    category: BlockCategory
    description: str = ""
    icon: str = ""
    template: str = Field(min_length=1)
    inputs: list[PortSpec] = Field(default_factory=list)
    outputs: list[PortSpec] = Field(min_length=1)

    model_config = {"frozen": True}

    @property
    def output_type(self) -> ValueType:
        return self.outputs[0].value_type

    def find_output(self, port_id: str) -> PortSpec | None:
        for port in self.outputs:
            if port.id == port_id:
                return port
        return None
