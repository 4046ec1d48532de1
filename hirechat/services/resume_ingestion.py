"""Resume ingestion: extraction, embedding, indexing and profile linkage."""

import asyncio
import logging
import warnings
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple

from ..exceptions import (
    AccessDeniedError,
    ConsistencyWarning,
    HireChatError,
    IndexTimeout,
    InsufficientContentError,
    ProfileNotFoundError,
    ResumeNotFoundError,
)
from ..models.resume import DeletionResult, IngestionResult
from ..models.user import Profile, UserRole
from .embedding_service import EmbeddingGenerator
from .object_storage import LocalObjectStorage
from .profile_store import ProfileStore
from .text_extractor import TextExtractor
from .vector_index import VectorIndex

logger = logging.getLogger(__name__)

# Shielded cleanup tasks keep a strong reference here until they finish
_cleanup_tasks: Set[asyncio.Task] = set()


def _describe(error: Exception) -> str:
    if isinstance(error, HireChatError):
        return error.message
    return str(error) or error.__class__.__name__


def ensure_candidate(role: UserRole) -> None:
    """Raise unless the role may own a resume."""
    if role is UserRole.CANDIDATE:
        return
    if role is UserRole.RECRUITER:
        raise AccessDeniedError("Only candidates can upload resumes")
    raise AssertionError(f"Unhandled role: {role!r}")


class CandidateLocks:
    """
    Per-candidate locks serializing ingestion and deletion within this process.

    A lock lives only while some caller holds or waits for it.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, candidate_id: str):
        lock = self._locks.setdefault(candidate_id, asyncio.Lock())
        self._users[candidate_id] = self._users.get(candidate_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[candidate_id] -= 1
            if not self._users[candidate_id]:
                del self._users[candidate_id]
                del self._locks[candidate_id]


class ResumeIngestionPipeline:
    """
    Extract -> store file -> embed -> upsert vector -> link profile.

    A failure after any side effect undoes what this invocation already
    committed, then re-raises the original error. Cleanup failures are
    logged as consistency warnings and never replace that error.
    """

    def __init__(
        self,
        extractor: TextExtractor,
        embedder: EmbeddingGenerator,
        index: VectorIndex,
        storage: LocalObjectStorage,
        profiles: ProfileStore,
        locks: CandidateLocks,
        min_text_length: int = 50,
    ):
        self.extractor = extractor
        self.embedder = embedder
        self.index = index
        self.storage = storage
        self.profiles = profiles
        self.locks = locks
        self.min_text_length = min_text_length

    @staticmethod
    def _consistency_warning(message: str, collected: Optional[List[str]] = None) -> None:
        logger.warning(f"{ConsistencyWarning.__name__}: {message}")
        warnings.warn(message, ConsistencyWarning, stacklevel=2)
        if collected is not None:
            collected.append(message)

    @staticmethod
    async def _shielded(coro):
        """Run cleanup so that caller cancellation does not interrupt it."""
        task = asyncio.ensure_future(coro)
        _cleanup_tasks.add(task)
        task.add_done_callback(_cleanup_tasks.discard)
        return await asyncio.shield(task)

    def _load_candidate(self, candidate_id: str) -> Tuple[Profile, Optional[str]]:
        record = self.profiles.get_record(candidate_id)
        if record is None:
            raise ProfileNotFoundError()
        profile = Profile.model_validate(record)
        ensure_candidate(profile.role)
        return profile, record.resume_text

    async def ingest(
        self,
        candidate_id: str,
        role: UserRole,
        data: bytes,
        filename: str,
        content_type: str = "application/pdf",
    ) -> IngestionResult:
        """
        Ingest a candidate's resume.

        Args:
            candidate_id: Candidate profile ID, also used as the vector point ID
            role: Caller's confirmed role
            data: PDF bytes, already size- and type-checked at the boundary
            filename: Original file name
            content_type: Declared MIME type

        Returns:
            IngestionResult describing the linked resume

        Raises:
            HireChatError: The originating failure of whichever step failed
        """
        ensure_candidate(role)
        async with self.locks.hold(candidate_id):
            return await self._ingest(candidate_id, data, filename, content_type)

    async def _ingest(self, candidate_id: str, data: bytes, filename: str, content_type: str) -> IngestionResult:
        previous, previous_text = self._load_candidate(candidate_id)

        # Step 1: extract and reject near-empty resumes before any write
        loop = asyncio.get_running_loop()
        resume_text = await loop.run_in_executor(None, self.extractor.extract_text, data)
        if len(resume_text.strip()) < self.min_text_length:
            logger.info(f"Rejected resume for candidate {candidate_id}: {len(resume_text.strip())} characters")
            raise InsufficientContentError()

        # Step 2: persist the raw file
        resume_path = await self.storage.put(candidate_id, filename, data, content_type)

        # Steps 3 and 4: embed and upsert
        try:
            vector = await self.embedder.embed(resume_text)
            await self.index.upsert(
                candidate_id,
                vector,
                {
                    "candidate_id": candidate_id,
                    "resume_path": resume_path,
                    "embedding_model": self.embedder.model_name,
                    "indexed_at": datetime.utcnow().isoformat(),
                },
            )
        except BaseException as e:
            logger.error(f"Resume indexing failed for candidate {candidate_id}: {e!r}")
            # A timed-out upsert may still land; treat the vector as possibly written
            vector_touched = isinstance(e, IndexTimeout)
            await self._shielded(
                self._compensate(candidate_id, resume_path, previous, previous_text, vector_touched)
            )
            raise

        # Step 5: link profile, file and vector in one write
        try:
            self.profiles.update_fields(
                candidate_id,
                resume_path=resume_path,
                resume_text=resume_text,
                vector_point_id=candidate_id,
            )
        except BaseException as e:
            logger.error(f"Profile update failed after indexing resume for candidate {candidate_id}: {e!r}")
            await self._shielded(self._compensate(candidate_id, resume_path, previous, previous_text, True))
            raise

        issues: List[str] = []
        if previous.resume_path and previous.resume_path != resume_path:
            try:
                await self._shielded(self.storage.delete(previous.resume_path))
            except Exception as e:
                self._consistency_warning(
                    f"previous resume file {previous.resume_path} was not deleted: {_describe(e)}", issues
                )

        logger.info(f"Ingested resume for candidate {candidate_id} ({len(resume_text)} characters)")
        return IngestionResult(
            candidate_id=candidate_id,
            resume_path=resume_path,
            vector_point_id=candidate_id,
            text_length=len(resume_text),
            warnings=issues,
        )

    async def _compensate(
        self,
        candidate_id: str,
        resume_path: str,
        previous: Profile,
        previous_text: Optional[str],
        vector_touched: bool,
    ) -> List[str]:
        """Undo this invocation's file upload and, if needed, its vector write."""
        issues: List[str] = []

        if vector_touched:
            try:
                if previous.has_resume and previous_text:
                    # Restore the vector the profile still points at
                    vector = await self.embedder.embed(previous_text)
                    await self.index.upsert(
                        candidate_id,
                        vector,
                        {
                            "candidate_id": candidate_id,
                            "resume_path": previous.resume_path,
                            "embedding_model": self.embedder.model_name,
                            "indexed_at": datetime.utcnow().isoformat(),
                        },
                    )
                else:
                    await self.index.delete(candidate_id)
            except Exception as e:
                self._consistency_warning(
                    f"vector for candidate {candidate_id} was not rolled back: {_describe(e)}", issues
                )

        try:
            await self.storage.delete(resume_path)
        except Exception as e:
            self._consistency_warning(f"uploaded file {resume_path} was not deleted: {_describe(e)}", issues)

        if not issues:
            logger.info(f"Rolled back partial resume ingestion for candidate {candidate_id}")
        return issues

    async def delete(self, candidate_id: str) -> DeletionResult:
        """
        Delete a candidate's resume vector, file and profile references.

        Vector and file deletion are best effort; the profile fields are
        always cleared so the profile never claims a partially removed
        resume. Runs to completion even if the caller is cancelled.

        Raises:
            ProfileNotFoundError: If the profile does not exist
            ResumeNotFoundError: If there is no resume to delete
            StoreError: If clearing the profile fields fails
        """
        return await self._shielded(self._locked_delete(candidate_id))

    async def _locked_delete(self, candidate_id: str) -> DeletionResult:
        async with self.locks.hold(candidate_id):
            profile = self.profiles.get(candidate_id)
            if profile is None:
                raise ProfileNotFoundError()
            if not profile.vector_point_id and not profile.resume_path:
                raise ResumeNotFoundError()

            issues: List[str] = []

            if profile.vector_point_id:
                try:
                    await self.index.delete(profile.vector_point_id)
                except Exception as e:
                    self._consistency_warning(f"vector cleanup: {_describe(e)}", issues)

            if profile.resume_path:
                try:
                    await self.storage.delete(profile.resume_path)
                except Exception as e:
                    self._consistency_warning(f"storage cleanup: {_describe(e)}", issues)

            self.profiles.update_fields(candidate_id, resume_path=None, resume_text=None, vector_point_id=None)

            if issues:
                logger.warning(f"Resume deletion for candidate {candidate_id} completed with warnings: {'; '.join(issues)}")
            else:
                logger.info(f"Deleted resume for candidate {candidate_id}")
            return DeletionResult(candidate_id=candidate_id, warnings=issues)
