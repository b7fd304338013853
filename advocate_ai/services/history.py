from typing import List, Optional, Sequence

from ..models.schemas import ConversationTurn
from .generative_service import Content


def history_to_contents(history: Optional[Sequence[ConversationTurn]]) -> List[Content]:
    """Convert prior turns, oldest first, into generation contents.

    Turns are forwarded as-is: same order, same text, nothing dropped or merged.
    """
    if not history:
        return []
    return [Content(role=turn.role, text=turn.text) for turn in history]
