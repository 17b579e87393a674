"""Content categories served by the store."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    slug: str
    label: str
    content_type: str
    upload_subdir: str
    snapshot_name: str


PDF = Category(
    slug="pdf",
    label="PDF",
    content_type="application/pdf",
    upload_subdir="pdfs",
    snapshot_name="pdfFilesData.json",
)

# Every image is served as JPEG regardless of its real subtype.
IMAGE = Category(
    slug="image",
    label="Image",
    content_type="image/jpeg",
    upload_subdir="images",
    snapshot_name="imageFilesData.json",
)

CATEGORIES = (PDF, IMAGE)
