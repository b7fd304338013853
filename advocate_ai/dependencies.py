"""FastAPI dependencies wiring the AI services to a request's DB session."""

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session
from typing import Optional

from .database import get_db
from .services.context_assembler import ContextAssembler
from .services.draft_manager import DraftLifecycleManager
from .services.extraction import StructuredExtractionEngine
from .services.generation import GenerationInvoker
from .services.generative_service import GenerativeService
from .services.stores import CaseStore, ClientStore, DraftStore

# Set during application startup
generative_service: Optional[GenerativeService] = None

def set_generative_service(service: Optional[GenerativeService]) -> None:
    global generative_service
    generative_service = service

def get_generative_service() -> GenerativeService:
    """Get generative service instance."""
    if not generative_service:
        raise HTTPException(status_code=503, detail="AI service not available")
    return generative_service

def get_invoker(service: GenerativeService = Depends(get_generative_service)) -> GenerationInvoker:
    return GenerationInvoker(service)

def get_context_assembler(db: Session = Depends(get_db)) -> ContextAssembler:
    return ContextAssembler(CaseStore(db), ClientStore(db))

def get_draft_store(db: Session = Depends(get_db)) -> DraftStore:
    return DraftStore(db)

def get_draft_manager(
    invoker: GenerationInvoker = Depends(get_invoker),
    draft_store: DraftStore = Depends(get_draft_store),
    db: Session = Depends(get_db)
) -> DraftLifecycleManager:
    return DraftLifecycleManager(invoker, draft_store, CaseStore(db), ClientStore(db))

def get_extraction_engine(
    service: GenerativeService = Depends(get_generative_service)
) -> StructuredExtractionEngine:
    return StructuredExtractionEngine(service)
