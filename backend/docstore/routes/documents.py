"""Documents API routes."""
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile
from fastapi.responses import StreamingResponse

from docstore.schemas.document import DocumentResponse, ErrorResponse
from docstore.services.document_service import PDF_MIME_TYPE, DocumentService
from docstore.services.file_storage import iter_chunks

router = APIRouter(prefix="/api/documents", tags=["documents"])


def get_document_service(request: Request) -> DocumentService:
    """FastAPI dependency returning the service built by create_app."""
    return request.app.state.document_service


def content_disposition(filename: str) -> str:
    """Attachment header carrying the original filename.

    Always has a quoted ``filename=``. Non-ASCII names also get an RFC 5987
    ``filename*`` and an ASCII fallback in the quoted part.
    """
    fallback = filename.encode("ascii", "replace").decode("ascii")
    escaped = fallback.replace("\\", "\\\\").replace('"', '\\"')
    header = f'attachment; filename="{escaped}"'
    if fallback != filename:
        header += f"; filename*=utf-8''{quote(filename)}"
    return header


@router.post(
    "/upload",
    response_model=DocumentResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
)
async def upload_document(
    file: UploadFile | None = File(None),
    service: DocumentService = Depends(get_document_service),
):
    """Upload a PDF and create its document record."""
    if file is None:
        contents, content_type, filename, size = None, None, "", 0
    else:
        # One byte past the limit is enough for the service to reject it.
        try:
            contents = await file.read(service.config.max_file_size + 1)
        finally:
            await file.close()
        content_type, filename = file.content_type, file.filename or "unnamed.pdf"
        size = file.size if file.size is not None else len(contents)

    document = await service.upload_file(
        contents,
        declared_mime_type=content_type,
        original_filename=filename,
        size=size,
    )
    return DocumentResponse.model_validate(document)


@router.get("", response_model=list[DocumentResponse])
async def list_documents(service: DocumentService = Depends(get_document_service)):
    """List all documents, sorted by created_at DESC."""
    documents = await service.list_documents()
    return [DocumentResponse.model_validate(d) for d in documents]


@router.get(
    "/{document_id}",
    response_class=StreamingResponse,
    responses={
        200: {"content": {PDF_MIME_TYPE: {}}},
        404: {"model": ErrorResponse},
    },
)
async def download_document(
    document_id: int,
    service: DocumentService = Depends(get_document_service),
):
    """Stream a document's PDF content as an attachment."""
    content, handle, size = await service.open_document_content(document_id)
    return StreamingResponse(
        iter_chunks(handle),
        media_type=PDF_MIME_TYPE,
        headers={
            "Content-Disposition": content_disposition(content.original_filename),
            "Content-Length": str(size),
        },
    )


@router.delete(
    "/{document_id}",
    status_code=204,
    response_class=Response,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_document(
    document_id: int,
    service: DocumentService = Depends(get_document_service),
):
    """Delete a document's file and its record."""
    await service.delete_document(document_id)
    return Response(status_code=204)
