"""Mutation response schemas. Record bodies are served as FileRecord."""
from pydantic import BaseModel


class MutationResponse(BaseModel):
    success: str
    id: str


class DeleteResponse(BaseModel):
    success: bool = True
    message: str
