from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from blockshader.app.api.deps import get_block_library, get_compiler_service
from blockshader.app.models.graph import BlockConnection, BlockGraph
from blockshader.app.models.shader import CompileRequest, CompileResponse, OrderResponse, ValidationResponse
from blockshader.app.services.block_library import BlockLibraryService
from blockshader.app.services.compiler_service import CompilerService
from blockshader.app.services.errors import GenerationError
from blockshader.app.services.graph_editing import extract_connections

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shaders", tags=["shaders"])


@router.post("/compile", response_model=CompileResponse)
async def compile_shader(
    request: CompileRequest,
    compiler: CompilerService = Depends(get_compiler_service),
) -> CompileResponse:
    try:
        return compiler.compile_graph(request, precision=request.precision)
    except GenerationError as error:
        logger.info("Shader compilation rejected: %s", " | ".join(error.diagnostics))
        raise HTTPException(status_code=422, detail={"diagnostics": error.diagnostics}) from error


@router.post("/validate", response_model=ValidationResponse)
async def validate_graph(
    request: BlockGraph,
    compiler: CompilerService = Depends(get_compiler_service),
) -> ValidationResponse:
    return compiler.validate_graph(request)


@router.post("/order", response_model=OrderResponse)
async def order_graph(
    request: BlockGraph,
    compiler: CompilerService = Depends(get_compiler_service),
) -> OrderResponse:
    try:
        return OrderResponse(order=compiler.order_graph(request))
    except GenerationError as error:
        raise HTTPException(status_code=422, detail={"diagnostics": error.diagnostics}) from error


@router.post("/connections", response_model=list[BlockConnection])
async def list_connections(
    request: BlockGraph,
    block_library: BlockLibraryService = Depends(get_block_library),
) -> list[BlockConnection]:
    return extract_connections(request.instances, block_library)
