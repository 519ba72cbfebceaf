"""Document response schemas."""
from datetime import datetime
from pydantic import BaseModel, Field
from docstore.schemas.base import CamelORMModel


class DocumentResponse(CamelORMModel):
    id: int
    original_filename: str
    stored_filename: str
    filepath: str
    filesize: int
    created_at: datetime


class ErrorResponse(BaseModel):
    status_code: int = Field(serialization_alias="statusCode")
    message: str
