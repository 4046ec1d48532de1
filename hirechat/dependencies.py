"""Service wiring for request handlers."""

import logging
from dataclasses import dataclass, field

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from hirechat.config import Settings, settings as default_settings
from hirechat.database import get_db
from hirechat.services.candidate_search import CandidateSearchService
from hirechat.services.chat_service import ChatService
from hirechat.services.embedding_service import EmbeddingGenerator, create_embedding_generator
from hirechat.services.llm_client import LLMClient
from hirechat.services.object_storage import LocalObjectStorage
from hirechat.services.profile_service import ProfileService
from hirechat.services.profile_store import ProfileStore
from hirechat.services.resume_ingestion import CandidateLocks, ResumeIngestionPipeline
from hirechat.services.shortlist_service import ShortlistOrchestrator
from hirechat.services.text_extractor import TextExtractor
from hirechat.services.vector_index import VectorIndex

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Long-lived clients shared by all requests."""
    settings: Settings
    embedder: EmbeddingGenerator
    index: VectorIndex
    storage: LocalObjectStorage
    llm: LLMClient
    extractor: TextExtractor = field(default_factory=TextExtractor)
    locks: CandidateLocks = field(default_factory=CandidateLocks)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceContainer":
        logger.info(
            f"Building services: embeddings={settings.embedding_provider}/{settings.vector_model_name}, "
            f"index={settings.cyborgdb_index_name}, llm={settings.openai_model}"
        )
        return cls(
            settings=settings,
            embedder=create_embedding_generator(settings),
            index=VectorIndex(settings),
            storage=LocalObjectStorage(
                root_dir=settings.storage_dir,
                public_base_url=settings.public_base_url,
                secret_key=settings.secret_key,
                algorithm=settings.algorithm,
            ),
            llm=LLMClient.from_settings(settings),
        )


def get_services(request: Request) -> ServiceContainer:
    """Return the application's service container, building it on first use."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        services = ServiceContainer.from_settings(default_settings)
        request.app.state.services = services
    return services


def get_search_service(
    services: ServiceContainer = Depends(get_services),
    db: Session = Depends(get_db),
) -> CandidateSearchService:
    return CandidateSearchService(services.embedder, services.index, ProfileStore.admin(db))


def get_ingestion_pipeline(
    services: ServiceContainer = Depends(get_services),
    db: Session = Depends(get_db),
) -> ResumeIngestionPipeline:
    return ResumeIngestionPipeline(
        extractor=services.extractor,
        embedder=services.embedder,
        index=services.index,
        storage=services.storage,
        profiles=ProfileStore.admin(db),
        locks=services.locks,
        min_text_length=services.settings.min_resume_text_length,
    )


def get_profile_service(
    services: ServiceContainer = Depends(get_services),
    db: Session = Depends(get_db),
    search: CandidateSearchService = Depends(get_search_service),
) -> ProfileService:
    return ProfileService(
        profiles=ProfileStore.admin(db),
        storage=services.storage,
        search=search,
        signed_url_ttl=services.settings.signed_url_ttl_seconds,
    )


def get_chat_service(db: Session = Depends(get_db)) -> ChatService:
    return ChatService(db)


def get_shortlist_orchestrator(
    services: ServiceContainer = Depends(get_services),
    chats: ChatService = Depends(get_chat_service),
    search: CandidateSearchService = Depends(get_search_service),
) -> ShortlistOrchestrator:
    return ShortlistOrchestrator(
        chats=chats,
        search=search,
        llm=services.llm,
        frontend_base_url=services.settings.frontend_base_url,
        overfetch=services.settings.search_overfetch,
        shortlist_size=services.settings.shortlist_size,
    )
