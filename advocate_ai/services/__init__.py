from .generative_service import (
    AnthropicGenerativeService, Content, GenerationConfig, GenerationResult,
    GenerativeService, JsonResponseConfig
)
from .generation import GenerationInvoker
from .context_assembler import ContextAssembler, truncate_document
from .draft_manager import DraftLifecycleManager
from .extraction import StructuredExtractionEngine
from .sanitizer import sanitize_output
from .stores import CaseStore, ClientStore, DraftStore

__all__ = [
    "AnthropicGenerativeService",
    "Content",
    "GenerationConfig",
    "GenerationResult",
    "GenerativeService",
    "JsonResponseConfig",
    "GenerationInvoker",
    "ContextAssembler",
    "truncate_document",
    "DraftLifecycleManager",
    "StructuredExtractionEngine",
    "sanitize_output",
    "CaseStore",
    "ClientStore",
    "DraftStore",
]
