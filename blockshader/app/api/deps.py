from __future__ import annotations

from fastapi import Depends, Request

from blockshader.app.core.container import AppContainer
from blockshader.app.services.block_library import BlockLibraryService
from blockshader.app.services.compiler_service import CompilerService


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def get_block_library(container: AppContainer = Depends(get_container)) -> BlockLibraryService:
    return container.block_library


def get_compiler_service(container: AppContainer = Depends(get_container)) -> CompilerService:
    return container.compiler_service
