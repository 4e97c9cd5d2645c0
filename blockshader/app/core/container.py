from __future__ import annotations

from dataclasses import dataclass

from blockshader.app.core.config import Settings
from blockshader.app.services.block_library import BlockLibraryService
from blockshader.app.services.compiler_service import CompilerService
from blockshader.app.services.dependency_resolver import DependencyResolver
from blockshader.app.services.graph_validator import GraphValidatorService
from blockshader.app.services.shader_generator import ShaderGeneratorService


@dataclass(slots=True)
class AppContainer:
    settings: Settings
    block_library: BlockLibraryService
    dependency_resolver: DependencyResolver
    shader_generator: ShaderGeneratorService
    graph_validator: GraphValidatorService
    compiler_service: CompilerService


def build_container(settings: Settings) -> AppContainer:
    block_library = BlockLibraryService()
    dependency_resolver = DependencyResolver(block_library)
    shader_generator = ShaderGeneratorService(block_library, resolver=dependency_resolver)
    graph_validator = GraphValidatorService(block_library, resolver=dependency_resolver)
    compiler_service = CompilerService(
        shader_generator=shader_generator,
        graph_validator=graph_validator,
        dependency_resolver=dependency_resolver,
        default_precision=settings.shader_precision,
    )

    return AppContainer(
        settings=settings,
        block_library=block_library,
        dependency_resolver=dependency_resolver,
        shader_generator=shader_generator,
        graph_validator=graph_validator,
        compiler_service=compiler_service,
    )
