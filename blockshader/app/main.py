from __future__ import annotations

import argparse
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blockshader.app.api import blocks, shaders
from blockshader.app.core.config import get_settings
from blockshader.app.core.container import build_container
from blockshader.app.core.logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.debug)

    app.state.container = build_container(settings)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(blocks.router, prefix=settings.api_prefix)
    app.include_router(shaders.router, prefix=settings.api_prefix)

    @app.get(f"{settings.api_prefix}/health")
    async def health() -> dict[str, str | int]:
        container = app.state.container
        return {
            "status": "ok",
            "block_kinds": len(container.block_library.list_kinds()),
            "shader_precision": settings.shader_precision,
        }

    return app


app = create_app()


def run() -> None:
    parser = argparse.ArgumentParser(description="Run the block shader compiler API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--log-level", default="info")
    parser.add_argument("--reload", action=argparse.BooleanOptionalAction, default=True)
    parser.add_argument("--access-log", action=argparse.BooleanOptionalAction, default=True)
    parser.add_argument("--debug", action=argparse.BooleanOptionalAction, default=None)
    parser.add_argument(
        "--precision",
        choices=("lowp", "mediump", "highp"),
        default=None,
        help="Float precision qualifier written at the top of generated shaders.",
    )
    args = parser.parse_args()

    if args.precision is not None:
        os.environ["BLOCKSHADER_SHADER_PRECISION"] = args.precision
    if args.debug is True:
        os.environ["BLOCKSHADER_DEBUG"] = "1"
    elif args.debug is False:
        os.environ["BLOCKSHADER_DEBUG"] = "0"

    get_settings.cache_clear()
    globals()["app"] = create_app()

    uvicorn.run(
        "blockshader.app.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
        access_log=args.access_log,
    )


if __name__ == "__main__":
    run()
