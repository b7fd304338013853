import logging
from typing import Optional, Union

from ..exceptions import ValidationError
from ..models.database import Draft
from .generation import GenerationInvoker
from .stores import CaseStore, ClientStore, DraftStore

logger = logging.getLogger(__name__)

DEFAULT_DRAFT_TYPE = "General Document"
INITIAL_STATUS = "in_progress"

OUTPUT_DIRECTIVE = (
    "Provide ONLY the draft content, without any conversational preamble or "
    "markdown code blocks (e.g., not like ```json```)."
)


def _is_blank(value: Optional[str]) -> bool:
    return not isinstance(value, str) or not value.strip()


class DraftLifecycleManager:
    """Generates a titled legal draft and stores it with its provenance."""

    def __init__(
        self,
        invoker: GenerationInvoker,
        draft_store: DraftStore,
        case_store: CaseStore,
        client_store: ClientStore
    ):
        self.invoker = invoker
        self.draft_store = draft_store
        self.case_store = case_store
        self.client_store = client_store

    async def generate_draft(
        self,
        owner_id: int,
        title: Optional[str],
        draft_type: Optional[str],
        instruction: Optional[str],
        case_reference: Union[int, str, None] = None,
        client_reference: Union[int, str, None] = None,
        document_snippet: Optional[str] = None
    ) -> Draft:
        missing = [
            name for name, value in (("title", title), ("prompt", instruction))
            if _is_blank(value)
        ]
        if missing:
            raise ValidationError(
                f"Missing required field(s) for AI draft generation: {', '.join(missing)}"
            )

        case = self.case_store.find_by_id(case_reference) if case_reference is not None else None
        client = self.client_store.find_by_id(client_reference) if client_reference is not None else None

        llm_prompt = (
            f"Generate a legal document draft. Type of draft: \"{draft_type or DEFAULT_DRAFT_TYPE}\". "
            f"Instructions: \"{instruction}\"."
        )
        if case:
            llm_prompt += (
                f"\n\nContextual Case Details: Case Name: {case.case_name}, "
                f"Case Number: {case.case_number}, Description: {case.description or 'N/A'}."
            )
        if client:
            llm_prompt += (
                f"\n\nContextual Client Details: Name: {client.first_name} {client.last_name}, "
                f"Email: {client.email or 'N/A'}, Phone: {client.phone or 'N/A'}."
            )
        if document_snippet:
            llm_prompt += f"\n\nRelevant Document Snippet for Context: \"{document_snippet}\"."
        llm_prompt += f"\n\n{OUTPUT_DIRECTIVE}"

        generated_content = await self.invoker.generate(llm_prompt)

        draft = self.draft_store.create(
            owner_id=owner_id,
            title=title,
            content=generated_content,
            draft_type=draft_type or None,
            source_prompt=instruction,
            case_id=case.id if case else None,
            client_id=client.id if client else None,
            status=INITIAL_STATUS,
            tags=[],
        )
        logger.info(f"Generated draft '{title}' ({len(generated_content)} chars) for user {owner_id}")
        return draft
