from fastapi import APIRouter, Depends, status
import logging

from ..auth import get_current_user
from ..dependencies import (
    get_context_assembler, get_draft_manager, get_extraction_engine, get_invoker
)
from ..exceptions import AdvocateAIError, ValidationError
from ..models.schemas import (
    ChatRequest, ChatResponse, ContextPayload, DraftGenerationRequest, DraftResponse,
    DraftSavedResponse, ErrorResponse, ExtractionRequest, ExtractionResponse
)
from ..services.context_assembler import ContextAssembler
from ..services.draft_manager import DraftLifecycleManager
from ..services.extraction import StructuredExtractionEngine
from ..services.generation import GenerationInvoker

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/ai",
    tags=["AI Assistant"],
    dependencies=[Depends(get_current_user)],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)

@router.post("/chat", response_model=ChatResponse)
async def handle_chat_query(
    request: ChatRequest,
    assembler: ContextAssembler = Depends(get_context_assembler),
    invoker: GenerationInvoker = Depends(get_invoker)
):
    """Answer a question, grounded on optional document, case and client context."""
    if not request.message or not request.message.strip():
        raise ValidationError("Message is required and must be a string")

    context = request.context_data or ContextPayload()
    history = request.chat_history or []
    request_shape = {
        "message_length": len(request.message),
        "history_turns": len(history),
        "context_keys": sorted(context.model_dump(exclude_none=True).keys()),
        "document_length": len(context.document_text or ""),
    }

    try:
        full_prompt = assembler.assemble(context, request.message)
        logger.info(f"Sending chat request to AI: prompt_length={len(full_prompt)}, {request_shape}")

        response = await invoker.generate(full_prompt, history)
    except AdvocateAIError as e:
        logger.error(f"AI chat error: {str(e)}; request={request_shape}")
        raise

    logger.info(f"Received AI response: response_length={len(response)}")
    return {"success": True, "response": response}

@router.post("/draft", response_model=DraftSavedResponse, status_code=status.HTTP_201_CREATED)
async def generate_draft(
    request: DraftGenerationRequest,
    current_user = Depends(get_current_user),
    manager: DraftLifecycleManager = Depends(get_draft_manager)
):
    """Generate a legal draft with AI and save it for the current user."""
    request_shape = {
        "title_length": len(request.title or ""),
        "prompt_length": len(request.prompt or ""),
        "has_case_reference": request.case_reference is not None,
        "has_client_reference": request.client_reference is not None,
        "snippet_length": len(request.document_snippet or ""),
    }

    try:
        draft = await manager.generate_draft(
            owner_id=current_user.id,
            title=request.title,
            draft_type=request.draft_type,
            instruction=request.prompt,
            case_reference=request.case_reference,
            client_reference=request.client_reference,
            document_snippet=request.document_snippet
        )
    except AdvocateAIError as e:
        logger.error(f"AI draft error: {str(e)}; request={request_shape}")
        raise

    logger.info(f"Draft {draft.id} saved for user {current_user.id}")
    return {
        "message": "Draft generated and saved successfully.",
        "draft": DraftResponse.from_draft(draft)
    }

@router.post("/extract", response_model=ExtractionResponse)
async def extract_information(
    request: ExtractionRequest,
    engine: StructuredExtractionEngine = Depends(get_extraction_engine)
):
    """Extract structured information matching a caller-supplied JSON schema."""
    request_shape = {
        "text_length": len(request.text_to_analyze or ""),
        "schema_keys": sorted(request.extraction_schema.keys()) if request.extraction_schema else [],
    }

    try:
        extracted = await engine.extract(request.text_to_analyze, request.extraction_schema)
    except AdvocateAIError as e:
        logger.error(f"AI extraction error: {str(e)}; request={request_shape}")
        raise

    return {
        "extracted_data": extracted,
        "message": "Information extracted successfully."
    }
