"""SQLAlchemy-backed lookups for cases and clients and persistence for drafts."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional, Union
import logging

from ..exceptions import PersistenceError
from ..models.database import Case, Client, Draft

logger = logging.getLogger(__name__)


def _parse_id(reference: Union[int, str, None]) -> Optional[int]:
    """Return the integer id behind ``reference``, or None if it cannot be one."""
    if reference is None or isinstance(reference, bool):
        return None
    try:
        return int(reference)
    except (TypeError, ValueError):
        return None


class CaseStore:
    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, reference: Union[int, str, None]) -> Optional[Case]:
        case_id = _parse_id(reference)
        if case_id is None:
            return None
        return self.db.get(Case, case_id)


class ClientStore:
    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, reference: Union[int, str, None]) -> Optional[Client]:
        client_id = _parse_id(reference)
        if client_id is None:
            return None
        return self.db.get(Client, client_id)


class DraftStore:
    def __init__(self, db: Session):
        self.db = db

    def create(self, **fields: Any) -> Draft:
        """Insert a new draft in a single transaction."""
        draft = Draft(**fields)
        try:
            self.db.add(draft)
            self.db.commit()
            self.db.refresh(draft)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving draft '{fields.get('title')}': {str(e)}")
            raise PersistenceError("Failed to save generated draft") from e

        logger.info(f"Created draft {draft.id} for user {draft.owner_id}")
        return draft

    def list_for_owner(self, owner_id: int) -> List[Draft]:
        return (
            self.db.query(Draft)
            .filter(Draft.owner_id == owner_id)
            .order_by(Draft.updated_at.desc(), Draft.id.desc())
            .all()
        )

    def get_for_owner(self, draft_id: int, owner_id: int) -> Optional[Draft]:
        return (
            self.db.query(Draft)
            .filter(Draft.id == draft_id, Draft.owner_id == owner_id)
            .first()
        )

    def update(self, draft: Draft, changes: Dict[str, Any]) -> Draft:
        for name, value in changes.items():
            setattr(draft, name, value)
        try:
            self.db.commit()
            self.db.refresh(draft)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating draft {draft.id}: {str(e)}")
            raise PersistenceError("Failed to update draft") from e
        return draft

    def delete(self, draft: Draft) -> None:
        try:
            self.db.delete(draft)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting draft {draft.id}: {str(e)}")
            raise PersistenceError("Failed to delete draft") from e
