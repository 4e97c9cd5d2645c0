from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from blockshader.app.api.deps import get_block_library
from blockshader.app.models.block import BlockCategory, BlockKind
from blockshader.app.services.block_library import BlockLibraryService

router = APIRouter(prefix="/blocks", tags=["blocks"])


@router.get("", response_model=list[BlockKind])
async def list_blocks(
    category: BlockCategory | None = Query(default=None),
    block_library: BlockLibraryService = Depends(get_block_library),
) -> list[BlockKind]:
    return block_library.list_kinds(category)


@router.get("/categories")
async def list_categories(block_library: BlockLibraryService = Depends(get_block_library)) -> dict[str, int]:
    return block_library.category_counts()


@router.get("/{kind_id}", response_model=BlockKind)
async def get_block(kind_id: str, block_library: BlockLibraryService = Depends(get_block_library)) -> BlockKind:
    kind = block_library.get_kind(kind_id)
    if not kind:
        raise HTTPException(status_code=404, detail=f"Block kind '{kind_id}' not found")
    return kind
