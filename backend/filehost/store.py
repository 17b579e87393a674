"""Category managers and the FastAPI dependency that hands them out.

Usage in routes:
    from filehost.store import manager_dependency

    get_manager = manager_dependency(PDF)

    @router.get("/fetch")
    async def list_files(manager: CategoryManager = Depends(get_manager)):
        return manager.list_all()
"""
from typing import Callable

from fastapi import Request

from filehost.config import Settings
from filehost.services.categories import CATEGORIES, Category
from filehost.services.category_manager import CategoryManager
from filehost.services.file_storage import BlobStore


def build_managers(cfg: Settings) -> dict[str, CategoryManager]:
    """One manager per category, each with its own blob root and snapshot."""
    return {
        category.slug: CategoryManager(
            category=category,
            blobs=BlobStore(cfg.storage_root / category.upload_subdir),
            snapshot_path=cfg.snapshot_root / category.snapshot_name,
        )
        for category in CATEGORIES
    }


def manager_dependency(category: Category) -> Callable[[Request], CategoryManager]:
    """FastAPI dependency returning the running app's manager for a category."""
    def get_manager(request: Request) -> CategoryManager:
        return request.app.state.managers[category.slug]
    return get_manager
