"""
Document API Routes

Static paths (``/tags``, ``/batch-delete``) are declared before the
``/{document_id}`` routes so they are matched first.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from halolight.auth.dependencies import AuthContext, get_auth_context
from halolight.dependencies import PaginationParams, get_db, get_pagination
from halolight.schemas.responses import ApiResponse, MessageResponse, PageMeta, PaginatedResponse

from .schemas import (
    BatchDeleteRequest,
    BatchDeleteResult,
    DocumentCreate,
    DocumentMove,
    DocumentOut,
    DocumentRename,
    DocumentShareCreate,
    DocumentTagsUpdate,
    DocumentUnshare,
    DocumentUpdate,
    TagCreate,
    TagOut,
)
from .service import DocumentService

document_router = APIRouter(prefix="/documents", tags=["Documents"])


@document_router.get("", response_model=PaginatedResponse[DocumentOut])
async def list_documents(
    pagination: PaginationParams = Depends(get_pagination),
    doc_type: Optional[str] = Query(None, alias="type"),
    folder: Optional[str] = Query(None),
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """The caller's documents with optional search, type and folder filters."""
    documents, total = await DocumentService(db).list_documents(
        auth.user_id,
        page=pagination.page,
        page_size=pagination.page_size,
        search=pagination.search,
        doc_type=doc_type,
        folder=folder,
    )
    return PaginatedResponse(data=documents, meta=PageMeta.create(pagination.page, pagination.page_size, total))


@document_router.get("/tags", response_model=ApiResponse[List[TagOut]])
async def list_tags(_: AuthContext = Depends(get_auth_context), db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await DocumentService(db).list_tags())


@document_router.post("/tags", response_model=ApiResponse[TagOut], status_code=status.HTTP_201_CREATED)
async def create_tag(body: TagCreate, _: AuthContext = Depends(get_auth_context), db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await DocumentService(db).create_tag(body))


@document_router.post("/batch-delete", response_model=ApiResponse[BatchDeleteResult])
async def batch_delete_documents(
    body: BatchDeleteRequest,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    """Delete several of the caller's documents at once."""
    deleted = await DocumentService(db).batch_delete(body.ids, user_id=auth.user_id)
    return ApiResponse(data=BatchDeleteResult(deleted=deleted))


@document_router.post("", response_model=ApiResponse[DocumentOut], status_code=status.HTTP_201_CREATED)
async def create_document(
    body: DocumentCreate,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await DocumentService(db).create_document(body, owner_id=auth.user_id))


@document_router.get("/{document_id}", response_model=ApiResponse[DocumentOut])
async def get_document(document_id: str, _: AuthContext = Depends(get_auth_context), db: AsyncSession = Depends(get_db)):
    return ApiResponse(data=await DocumentService(db).get_document(document_id))


@document_router.put("/{document_id}", response_model=ApiResponse[DocumentOut])
async def update_document(
    document_id: str,
    body: DocumentUpdate,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await DocumentService(db).update_document(document_id, body, user_id=auth.user_id))


@document_router.patch("/{document_id}/rename", response_model=ApiResponse[DocumentOut])
async def rename_document(
    document_id: str,
    body: DocumentRename,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await DocumentService(db).rename_document(document_id, body.title, user_id=auth.user_id))


@document_router.post("/{document_id}/move", response_model=ApiResponse[DocumentOut])
async def move_document(
    document_id: str,
    body: DocumentMove,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await DocumentService(db).move_document(document_id, body.folder, user_id=auth.user_id))


@document_router.post("/{document_id}/tags", response_model=ApiResponse[DocumentOut])
async def set_document_tags(
    document_id: str,
    body: DocumentTagsUpdate,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await DocumentService(db).set_tags(document_id, body.tag_ids, user_id=auth.user_id))


@document_router.post("/{document_id}/share", response_model=ApiResponse[DocumentOut])
async def share_document(
    document_id: str,
    body: DocumentShareCreate,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(
        data=await DocumentService(db).share_document(
            document_id, body.user_id, body.permission, user_id=auth.user_id
        )
    )


@document_router.post("/{document_id}/unshare", response_model=ApiResponse[DocumentOut])
async def unshare_document(
    document_id: str,
    body: DocumentUnshare,
    auth: AuthContext = Depends(get_auth_context),
    db: AsyncSession = Depends(get_db),
):
    return ApiResponse(data=await DocumentService(db).unshare_document(document_id, body.user_id, user_id=auth.user_id))


@document_router.delete("/{document_id}", response_model=ApiResponse[MessageResponse])
async def delete_document(document_id: str, auth: AuthContext = Depends(get_auth_context), db: AsyncSession = Depends(get_db)):
    await DocumentService(db).delete_document(document_id, user_id=auth.user_id)
    return ApiResponse(data=MessageResponse(message="Document deleted successfully"))
