from __future__ import annotations

import logging

from blockshader.app.models.graph import BlockGraph
from blockshader.app.models.shader import (
    CompileResponse,
    GenerationContext,
    ShaderPrecision,
    ValidationResponse,
)
from blockshader.app.services.dependency_resolver import DependencyResolver
from blockshader.app.services.graph_validator import GraphValidatorService
from blockshader.app.services.shader_generator import ShaderGeneratorService

logger = logging.getLogger(__name__)


class CompilerService:
    """Compiles whole block graphs: ordering, code generation and diagnostics together."""

    def __init__(
        self,
        shader_generator: ShaderGeneratorService,
        graph_validator: GraphValidatorService,
        dependency_resolver: DependencyResolver,
        default_precision: ShaderPrecision = "mediump",
    ) -> None:
        self._shader_generator = shader_generator
        self._graph_validator = graph_validator
        self._dependency_resolver = dependency_resolver
        self._default_precision = default_precision

    def compile_graph(self, graph: BlockGraph, precision: ShaderPrecision | None = None) -> CompileResponse:
        context = GenerationContext(
            precision=precision or self._default_precision,
            uniforms=graph.uniforms,
        )
        source = self._shader_generator.generate(graph.instances, context)
        order = self._dependency_resolver.order_ids(graph.instances)
        problems = self._graph_validator.validate(graph.instances)
        if problems:
            logger.info("Compiled block graph with %d warning(s): %s", len(problems), " | ".join(problems))
        return CompileResponse(source=source, order=order, problems=problems)

    def validate_graph(self, graph: BlockGraph) -> ValidationResponse:
        problems = self._graph_validator.validate(graph.instances)
        return ValidationResponse(valid=not problems, problems=problems)

    def order_graph(self, graph: BlockGraph) -> list[str]:
        return self._dependency_resolver.order_ids(graph.instances)
