from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from blockshader.app.models.shader import ShaderPrecision


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BLOCKSHADER_", extra="ignore")

    app_name: str = "Block Shader Compiler API"
    app_version: str = "0.1.0"
    debug: bool = False

    api_prefix: str = "/api"

    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    shader_precision: ShaderPrecision = "mediump"


@lru_cache
def get_settings() -> Settings:
    return Settings()
