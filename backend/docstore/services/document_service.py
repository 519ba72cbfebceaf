"""Document storage service.

Owns the two-phase lifecycle of a document:

- create: validate, write bytes to the upload directory, then insert the row.
  A row is never created for content that was not written.
- delete: unlink the file (best-effort), then delete the row.

Content is never read here. ``get_document_content`` hands back a path and
``open_document_content`` an open handle, so the HTTP layer can stream it.
"""
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import select, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docstore.config import Settings
from docstore.errors import (
    DocumentNotFound,
    FileTooLarge,
    InvalidFileType,
    NoFileProvided,
    StorageDeleteError,
    StorageQueryError,
    StorageWriteError,
)
from docstore.models.document import Document
from docstore.services.file_storage import LocalFileStorage

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
DEFAULT_MAX_FILE_SIZE = 10_485_760


@dataclass(frozen=True)
class StorageConfig:
    upload_dir: str = "./uploads"
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageConfig":
        return cls(upload_dir=settings.UPLOAD_DIR, max_file_size=settings.MAX_FILE_SIZE_BYTES)


@dataclass(frozen=True)
class DocumentContent:
    path: str
    original_filename: str


class DocumentService:
    """Validates uploads, stores content on disk and keeps the metadata rows."""

    def __init__(
        self,
        config: StorageConfig,
        session_factory: async_sessionmaker[AsyncSession],
    ):
        self.config = config
        self.session_factory = session_factory
        self.storage = LocalFileStorage(config.upload_dir, extension=".pdf")

    def validate_upload(self, content: bytes | None, declared_mime_type: str | None, size: int) -> None:
        """Raise the matching validation error. Checks presence, type, then size."""
        if not content:
            raise NoFileProvided()
        if declared_mime_type != PDF_MIME_TYPE:
            raise InvalidFileType()
        if size > self.config.max_file_size:
            raise FileTooLarge(self.config.max_file_size)

    async def upload_file(
        self,
        content: bytes | None,
        declared_mime_type: str | None,
        original_filename: str,
        size: int,
    ) -> Document:
        """Validate and persist an upload. Returns the stored record."""
        self.validate_upload(content, declared_mime_type, size)

        stored_filename = self.storage.new_filename()
        try:
            filepath = await self.storage.save(content, stored_filename)
        except OSError as e:
            logger.error("Error writing file %s: %s", stored_filename, e, exc_info=True)
            raise StorageWriteError(f"Failed to upload file: {e}") from e

        logger.info("File saved: %s", filepath)

        document = Document(
            original_filename=original_filename,
            stored_filename=stored_filename,
            filepath=filepath,
            filesize=len(content),
        )
        try:
            async with self.session_factory() as session:
                session.add(document)
                await session.commit()
                await session.refresh(document)
        except SQLAlchemyError as e:
            # The written file stays behind as an orphan for operators to clean up.
            logger.error("Error saving metadata, orphaned file left at %s: %s", filepath, e, exc_info=True)
            raise StorageWriteError(f"Failed to upload file: {e}") from e

        return document

    async def list_documents(self) -> list[Document]:
        """All documents, most recent first."""
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(Document).order_by(desc(Document.created_at), desc(Document.id))
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Error fetching documents: %s", e, exc_info=True)
            raise StorageQueryError(f"Failed to fetch documents: {e}") from e

    async def get_document(self, document_id: int) -> Document:
        async with self.session_factory() as session:
            return await self._get_or_404(session, document_id)

    async def get_document_content(self, document_id: int) -> DocumentContent:
        """Resolve where a document's bytes live on disk."""
        document = await self.get_document(document_id)

        if not await self.storage.exists(document.filepath):
            logger.warning("File not found on disk: %s", document.filepath)
            raise DocumentNotFound(f"File for document ID {document_id} not found on disk")

        return DocumentContent(path=document.filepath, original_filename=document.original_filename)

    async def open_document_content(self, document_id: int) -> tuple[DocumentContent, Any, int]:
        """Resolve and open a document's content. Returns (content, handle, size).

        The file is opened before any response starts, so an unlink racing the
        download still ends as DocumentNotFound. The caller closes the handle.
        """
        content = await self.get_document_content(document_id)
        try:
            handle, size = await self.storage.open(content.path)
        except FileNotFoundError as e:
            logger.warning("File not found on disk: %s", content.path)
            raise DocumentNotFound(f"File for document ID {document_id} not found on disk") from e
        return content, handle, size

    async def delete_document(self, document_id: int) -> None:
        """Unlink the file if present, then delete the row."""
        async with self.session_factory() as session:
            document = await self._get_or_404(session, document_id)

            try:
                if await self.storage.delete(document.filepath):
                    logger.info("File deleted from disk: %s", document.filepath)
                else:
                    logger.warning("File not found on disk: %s", document.filepath)

                await session.delete(document)
                await session.commit()
            except (OSError, SQLAlchemyError) as e:
                logger.error("Error deleting document %s: %s", document_id, e, exc_info=True)
                raise StorageDeleteError(f"Failed to delete document: {e}") from e

        logger.info("Document deleted from database: ID %s", document_id)

    async def _get_or_404(self, session: AsyncSession, document_id: int) -> Document:
        result = await session.execute(select(Document).where(Document.id == document_id))
        document = result.scalar_one_or_none()
        if not document:
            raise DocumentNotFound(f"Document with ID {document_id} not found")
        return document
