import logging
from typing import Optional

from ..config import settings
from ..models.database import Case, Client
from ..models.schemas import ContextPayload
from .stores import CaseStore, ClientStore

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "... [content truncated]"
DEFAULT_DOCUMENT_NAME = "Untitled Document"


def truncate_document(text: str, limit: Optional[int] = None) -> str:
    """Cut ``text`` to ``limit`` characters and mark the cut.

    Text at or under the limit comes back unchanged.
    """
    limit = settings.max_document_length if limit is None else limit
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def case_summary(case: Case) -> str:
    return (
        f"Regarding Case \"{case.case_name}\" (Number: {case.case_number}, "
        f"Description: {case.description or 'N/A'}): \n\n"
    )


def client_summary(client: Client) -> str:
    return (
        f"Regarding Client \"{client.first_name} {client.last_name}\" "
        f"(Email: {client.email or 'N/A'}, Phone: {client.phone or 'N/A'}): \n\n"
    )


class ContextAssembler:
    """Layers optional grounding context ahead of a user instruction.

    Layers wrap outward in a fixed order: the document (or snippet) sits
    closest to the instruction, then the case summary, then the client
    summary. References that do not resolve are skipped.
    """

    def __init__(self, case_store: CaseStore, client_store: ClientStore):
        self.case_store = case_store
        self.client_store = client_store

    def assemble(self, context: Optional[ContextPayload], instruction: str) -> str:
        if context is None:
            return instruction

        prompt = instruction

        if context.document_text:
            prompt = (
                f"Document Name: {context.document_name or DEFAULT_DOCUMENT_NAME}\n"
                f"Document Content:\n{truncate_document(context.document_text)}\n\n"
                f"Based on the above document, {prompt}"
            )
        elif context.free_text_snippet:
            prompt = (
                f"Consider the following document content for context: "
                f"\"{context.free_text_snippet}\".\n\n{prompt}"
            )

        if context.case_reference is not None:
            case = self.case_store.find_by_id(context.case_reference)
            if case:
                prompt = case_summary(case) + prompt
            else:
                logger.debug(f"Case {context.case_reference!r} not found, skipping case context")

        if context.client_reference is not None:
            client = self.client_store.find_by_id(context.client_reference)
            if client:
                prompt = client_summary(client) + prompt
            else:
                logger.debug(f"Client {context.client_reference!r} not found, skipping client context")

        return prompt
