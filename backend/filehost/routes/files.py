"""Files API routes, mounted once per category (/pdf/..., /image/...)."""
from typing import Optional

from fastapi import APIRouter, Depends, File as FastAPIFile, Form, UploadFile
from fastapi.responses import Response

from filehost.errors import BadRequest
from filehost.models.file_record import FileRecord
from filehost.schemas.file import DeleteResponse, MutationResponse
from filehost.services.categories import Category
from filehost.services.category_manager import CategoryManager, FileUpdate
from filehost.store import manager_dependency


def build_router(category: Category) -> APIRouter:
    router = APIRouter(prefix=f"/{category.slug}", tags=[category.slug])
    get_manager = manager_dependency(category)
    label = category.label

    @router.get("/fetch", response_model=list[FileRecord])
    async def list_files(manager: CategoryManager = Depends(get_manager)):
        """List metadata for every stored file."""
        return manager.list_all()

    @router.get("/fetch/{file_id}")
    async def fetch_file(file_id: str, manager: CategoryManager = Depends(get_manager)):
        """Return the raw file bytes."""
        data = await manager.fetch(file_id)
        return Response(content=data, media_type=category.content_type)

    @router.get("/metadata/{file_id}", response_model=FileRecord)
    async def get_file_metadata(file_id: str, manager: CategoryManager = Depends(get_manager)):
        """Get file metadata by ID."""
        return manager.get(file_id)

    @router.post("/create", response_model=MutationResponse)
    async def create_file(
        file: Optional[UploadFile] = FastAPIFile(None),
        manager: CategoryManager = Depends(get_manager),
    ):
        """Upload a file and create its record."""
        if file is None:
            raise BadRequest("No file uploaded")
        contents = await file.read()
        record = await manager.create(file.filename or "", contents)
        return MutationResponse(success="success", id=record.id)

    @router.patch("/edit/{file_id}", response_model=MutationResponse)
    async def edit_file(
        file_id: str,
        file: Optional[UploadFile] = FastAPIFile(None),
        new_filename: Optional[str] = Form(None, alias="newFilename"),
        manager: CategoryManager = Depends(get_manager),
    ):
        """Replace the file bytes and/or rename it. Only provided fields change."""
        contents = await file.read() if file is not None else None
        filename = new_filename or (file.filename if file is not None else None)
        record = await manager.edit(file_id, FileUpdate(filename=filename, data=contents))
        return MutationResponse(success=f"{label} updated successfully", id=record.id)

    @router.delete("/delete/{file_id}", response_model=DeleteResponse)
    async def delete_file(file_id: str, manager: CategoryManager = Depends(get_manager)):
        """Delete a file and its record."""
        await manager.delete(file_id)
        return DeleteResponse(message=f"{label} file deleted successfully")

    return router
