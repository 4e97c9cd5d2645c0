from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from blockshader.app.models.graph import BlockGraph, DynamicUniform

ShaderPrecision = Literal["lowp", "mediump", "highp"]


class GenerationContext(BaseModel):
    precision: ShaderPrecision = "mediump"
    uniforms: list[DynamicUniform] = Field(default_factory=list)


class CompileRequest(BlockGraph):
    precision: ShaderPrecision | None = None


class CompileResponse(BaseModel):
    source: str
    order: list[str] = Field(default_factory=list)
    problems: list[str] = Field(default_factory=list)


class ValidationResponse(BaseModel):
    valid: bool
    problems: list[str] = Field(default_factory=list)


class OrderResponse(BaseModel):
    order: list[str] = Field(default_factory=list)
