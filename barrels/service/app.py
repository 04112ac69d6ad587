"""FastAPI application for barrels studio mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field

from ..config import DEFAULT_STUDIO_HOST, DEFAULT_STUDIO_PORT
from ..errors import BarrelNotFoundError, NoBarrelFoundError, SourceFileNotFoundError
from ..logging import get_logger
from ..studio import Studio, barrel_payload

logger = get_logger("service")

_T = TypeVar("_T")


class FileModel(BaseModel):
    name: str
    path: str
    meta: Dict[str, Any] = Field(default_factory=dict)


class BarrelModel(BaseModel):
    dir: str
    relative_path: str
    barrel_file: str
    files: List[FileModel] = Field(default_factory=list)


class UpdateMetaRequest(BaseModel):
    meta: Dict[str, Any] = Field(default_factory=dict)


class CreateFileRequest(BaseModel):
    file_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("file_name", "fileName")
    )
    meta: Optional[Dict[str, Any]] = None


class SuccessResponse(BaseModel):
    success: bool
    path: Optional[str] = None
    file_count: Optional[int] = None


class HealthResponse(BaseModel):
    status: str


async def _run_blocking(func: Callable[[], _T]) -> _T:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(
    base_dir: Union[str, Path] = ".",
    studio_factory: Optional[Callable[[], Studio]] = None,
) -> FastAPI:
    """Create the FastAPI application exposing barrel browsing and editing."""

    factory = studio_factory or (lambda: Studio(base_dir))
    app = FastAPI(title="Barrels Studio", version="1.0.0")

    async def get_studio() -> Studio:
        # Built per request so every call sees the current tree on disk.
        return factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/api/barrels", response_model=List[BarrelModel])
    async def list_barrels(studio: Studio = Depends(get_studio)) -> List[BarrelModel]:
        barrels = await _run_blocking(studio.list_barrels)
        return [BarrelModel(**barrel_payload(info)) for info in barrels]

    @app.get("/api/barrels/{barrel_path:path}/files", response_model=BarrelModel)
    async def get_barrel(barrel_path: str, studio: Studio = Depends(get_studio)) -> BarrelModel:
        info = await _run_blocking(lambda: studio.get_barrel(barrel_path))
        return BarrelModel(**barrel_payload(info))

    @app.put("/api/barrels/{barrel_path:path}/files/{file_name}", response_model=SuccessResponse)
    async def update_file(
        barrel_path: str,
        file_name: str,
        payload: UpdateMetaRequest,
        studio: Studio = Depends(get_studio),
    ) -> SuccessResponse:
        result = await _run_blocking(
            lambda: studio.update_file(barrel_path, file_name, payload.meta)
        )
        return SuccessResponse(success=True, file_count=result.file_count)

    @app.post("/api/barrels/{barrel_path:path}/files", response_model=SuccessResponse)
    async def create_file(
        barrel_path: str,
        payload: CreateFileRequest,
        studio: Studio = Depends(get_studio),
    ) -> Any:
        if not payload.file_name:
            return JSONResponse(status_code=400, content={"detail": "fileName is required"})
        meta = payload.meta if payload.meta is not None else {"title": ""}
        path, result = await _run_blocking(
            lambda: studio.create_file(barrel_path, payload.file_name or "", meta)
        )
        return SuccessResponse(success=True, path=str(path), file_count=result.file_count)

    @app.delete(
        "/api/barrels/{barrel_path:path}/files/{file_name}", response_model=SuccessResponse
    )
    async def delete_file(
        barrel_path: str,
        file_name: str,
        studio: Studio = Depends(get_studio),
    ) -> SuccessResponse:
        result = await _run_blocking(lambda: studio.delete_file(barrel_path, file_name))
        return SuccessResponse(success=True, file_count=result.file_count)

    async def _not_found(_: Any, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    for exc_type in (
        BarrelNotFoundError,
        SourceFileNotFoundError,
        NoBarrelFoundError,
        FileNotFoundError,
    ):
        app.add_exception_handler(exc_type, _not_found)

    @app.exception_handler(FileExistsError)
    async def file_exists_handler(_: Any, exc: FileExistsError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    base_dir: Union[str, Path] = ".",
    host: str = DEFAULT_STUDIO_HOST,
    port: int = DEFAULT_STUDIO_PORT,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(base_dir)
    logger.info("Studio listening on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port)
