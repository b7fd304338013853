from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any, Literal, Union
from datetime import datetime

DraftStatus = Literal["in_progress", "under_review", "finalized", "archived"]

# Case and client references arrive as numeric ids or their string form
Reference = Union[int, str]


class CamelModel(BaseModel):
    """Base for API payloads: camelCase on the wire, snake_case accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# User Schemas
class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8)

class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class UserLogin(BaseModel):
    username: str
    password: str

class Token(BaseModel):
    access_token: str
    token_type: str

# Conversation Schemas
class ConversationTurn(CamelModel):
    role: Literal["user", "model"]
    text: str

    @model_validator(mode="before")
    @classmethod
    def flatten_parts(cls, data: Any) -> Any:
        """Accept the provider wire shape ``{role, parts: [{text}]}`` as well."""
        if isinstance(data, dict) and "text" not in data and isinstance(data.get("parts"), list):
            texts = [part.get("text", "") for part in data["parts"] if isinstance(part, dict)]
            data = {"role": data.get("role"), "text": "".join(texts)}
        return data

class ContextPayload(CamelModel):
    document_text: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("documentText", "document_text", "fileContent")
    )
    document_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("documentName", "document_name", "fileName")
    )
    free_text_snippet: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("freeTextSnippet", "free_text_snippet", "relevantText")
    )
    case_reference: Optional[Reference] = Field(
        default=None, validation_alias=AliasChoices("caseReference", "case_reference", "caseId")
    )
    client_reference: Optional[Reference] = Field(
        default=None, validation_alias=AliasChoices("clientReference", "client_reference", "clientId")
    )

# AI Schemas
class ChatRequest(CamelModel):
    message: Optional[str] = None
    chat_history: Optional[List[ConversationTurn]] = None
    context_data: Optional[ContextPayload] = None

class ChatResponse(CamelModel):
    success: bool
    response: str

class DraftGenerationRequest(CamelModel):
    title: Optional[str] = None
    draft_type: Optional[str] = None
    prompt: Optional[str] = None
    case_reference: Optional[Reference] = Field(
        default=None, validation_alias=AliasChoices("caseReference", "case_reference", "caseId")
    )
    client_reference: Optional[Reference] = Field(
        default=None, validation_alias=AliasChoices("clientReference", "client_reference", "clientId")
    )
    document_snippet: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("documentSnippet", "document_snippet", "documentContent")
    )

class ExtractionRequest(CamelModel):
    text_to_analyze: Optional[str] = None
    extraction_schema: Optional[Dict[str, Any]] = None

class ExtractionResponse(CamelModel):
    extracted_data: Dict[str, Any]
    message: str

# Draft Schemas
class DraftResponse(CamelModel):
    id: int
    owner: int
    title: str
    content: str
    draft_type: Optional[str] = None
    source_prompt: str
    linked_case: Optional[int] = None
    linked_client: Optional[int] = None
    status: DraftStatus
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_draft(cls, draft) -> "DraftResponse":
        return cls(
            id=draft.id,
            owner=draft.owner_id,
            title=draft.title,
            content=draft.content,
            draft_type=draft.draft_type,
            source_prompt=draft.source_prompt,
            linked_case=draft.case_id,
            linked_client=draft.client_id,
            status=draft.status,
            tags=draft.tags or [],
            created_at=draft.created_at,
            updated_at=draft.updated_at,
        )

class DraftSavedResponse(CamelModel):
    message: str
    draft: DraftResponse

class DraftUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = None
    draft_type: Optional[str] = None
    case_reference: Optional[int] = None
    client_reference: Optional[int] = None
    status: Optional[DraftStatus] = None
    tags: Optional[List[str]] = None

class MessageResponse(BaseModel):
    message: str

# Error Schemas
class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
