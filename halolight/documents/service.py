"""
Document service.

Reads of a single document are open to any authenticated user; every
mutation is limited to the document owner. A missing document is reported
before an ownership failure.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from halolight.database.activity import record_activity
from halolight.database.models import Document, SharePermission
from halolight.database.repository import DocumentRepository, TagRepository, TeamRepository, UserRepository
from halolight.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from halolight.users.schemas import UserSummary

from .schemas import (
    DocumentCreate,
    DocumentOut,
    DocumentShareOut,
    DocumentUpdate,
    TagCreate,
    TagOut,
)

logger = logging.getLogger(__name__)


def content_size(content: Optional[str]) -> int:
    """Size of the content in UTF-8 bytes."""
    return len((content or "").encode("utf-8"))


class DocumentService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.documents = DocumentRepository(session)
        self.tags = TagRepository(session)
        self.users = UserRepository(session)
        self.teams = TeamRepository(session)

    async def _get_or_404(self, document_id: str) -> Document:
        document = await self.documents.get(document_id)
        if not document:
            raise NotFoundError("Document not found")
        return document

    async def _get_owned(self, document_id: str, user_id: str) -> Document:
        document = await self._get_or_404(document_id)
        if document.owner_id != user_id:
            raise ForbiddenError("Only the document owner can modify this document")
        return document

    async def _check_tags(self, tag_ids: List[str]) -> List[str]:
        unique_ids = list(dict.fromkeys(tag_ids))
        if await self.tags.count_existing(unique_ids) != len(unique_ids):
            raise ValidationError("Unknown tag ids", details={"tagIds": unique_ids})
        return unique_ids

    async def _check_team(self, team_id: Optional[str]) -> None:
        if team_id and not await self.teams.exists(team_id):
            raise ValidationError("Unknown team id", details={"teamId": team_id})

    async def _to_out(self, documents: List[Document], with_shares: bool = False) -> List[DocumentOut]:
        tags = await self.documents.get_tags([d.id for d in documents])
        owners: Dict[str, Optional[UserSummary]] = {}

        items = []
        for document in documents:
            if document.owner_id not in owners:
                owner = await self.users.get(document.owner_id)
                owners[document.owner_id] = UserSummary.model_validate(owner) if owner else None

            out = DocumentOut.model_validate(document)
            out.owner = owners[document.owner_id]
            out.tags = [TagOut.model_validate(tag) for tag in tags.get(document.id, [])]
            if with_shares:
                out.shares = [
                    DocumentShareOut.model_validate(share) for share in await self.documents.get_shares(document.id)
                ]
            items.append(out)
        return items

    async def _detail(self, document_id: str) -> DocumentOut:
        (out,) = await self._to_out([await self._get_or_404(document_id)], with_shares=True)
        return out

    async def list_documents(
        self,
        user_id: str,
        *,
        page: int,
        page_size: int,
        search: Optional[str] = None,
        doc_type: Optional[str] = None,
        folder: Optional[str] = None,
    ) -> Tuple[List[DocumentOut], int]:
        """The caller's own documents, most recently updated first."""
        documents, total = await self.documents.list_for_owner(
            user_id,
            skip=(page - 1) * page_size,
            limit=page_size,
            search=search,
            doc_type=doc_type,
            folder=folder,
        )
        return await self._to_out(documents), total

    async def get_document(self, document_id: str) -> DocumentOut:
        """Fetch a document and count the view."""
        document = await self._get_or_404(document_id)
        await self.documents.increment_views(document_id)
        await self.session.refresh(document)
        return await self._detail(document_id)

    async def create_document(self, data: DocumentCreate, owner_id: str) -> DocumentOut:
        tag_ids = await self._check_tags(data.tag_ids)
        await self._check_team(data.team_id)

        document = await self.documents.create(
            {
                "title": data.title,
                "content": data.content,
                "folder": data.folder,
                "type": data.type,
                "team_id": data.team_id,
                "size": content_size(data.content),
                "owner_id": owner_id,
            }
        )
        if tag_ids:
            await self.documents.replace_tags(document.id, tag_ids)

        await record_activity(self.session, owner_id, "create", "document", document.id, {"title": document.title})
        logger.info(f"Document {document.id} created by {owner_id}")
        return await self._detail(document.id)

    async def update_document(self, document_id: str, data: DocumentUpdate, user_id: str) -> DocumentOut:
        await self._get_owned(document_id, user_id)
        changes: Dict[str, Any] = data.model_dump(exclude_unset=True)
        if "team_id" in changes:
            await self._check_team(changes["team_id"])
        if "content" in changes:
            changes["content"] = changes["content"] or ""
            changes["size"] = content_size(changes["content"])

        await self.documents.update(document_id, changes)
        return await self._detail(document_id)

    async def rename_document(self, document_id: str, title: str, user_id: str) -> DocumentOut:
        await self._get_owned(document_id, user_id)
        await self.documents.update(document_id, {"title": title})
        return await self._detail(document_id)

    async def move_document(self, document_id: str, folder: Optional[str], user_id: str) -> DocumentOut:
        await self._get_owned(document_id, user_id)
        await self.documents.update(document_id, {"folder": folder})
        return await self._detail(document_id)

    async def set_tags(self, document_id: str, tag_ids: List[str], user_id: str) -> DocumentOut:
        """Replace the document's tags."""
        await self._get_owned(document_id, user_id)
        await self.documents.replace_tags(document_id, await self._check_tags(tag_ids))
        return await self._detail(document_id)

    async def share_document(
        self, document_id: str, target_user_id: str, permission: SharePermission, user_id: str
    ) -> DocumentOut:
        """Share with a user; sharing again updates the permission."""
        await self._get_owned(document_id, user_id)
        if not await self.users.exists(target_user_id):
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        await self.documents.upsert_share(document_id, target_user_id, permission)
        return await self._detail(document_id)

    async def unshare_document(self, document_id: str, target_user_id: str, user_id: str) -> DocumentOut:
        await self._get_owned(document_id, user_id)
        await self.documents.remove_share(document_id, target_user_id)
        return await self._detail(document_id)

    async def delete_document(self, document_id: str, user_id: str) -> None:
        document = await self._get_owned(document_id, user_id)
        await self.documents.delete(document_id)
        await record_activity(self.session, user_id, "delete", "document", document_id, {"title": document.title})
        logger.info(f"Document {document_id} deleted by {user_id}")

    async def batch_delete(self, document_ids: List[str], user_id: str) -> int:
        """Delete the caller's own documents among ``document_ids``; others are skipped."""
        deleted = await self.documents.delete_owned(list(dict.fromkeys(document_ids)), user_id)
        if deleted:
            await record_activity(self.session, user_id, "batch_delete", "document", None, {"count": deleted})
        return deleted

    async def list_tags(self) -> List[TagOut]:
        return [TagOut.model_validate(tag) for tag in await self.tags.list_ordered()]

    async def create_tag(self, data: TagCreate) -> TagOut:
        if await self.tags.get_by_name(data.name):
            raise ConflictError("Tag already exists")
        return TagOut.model_validate(await self.tags.create(data.model_dump()))
