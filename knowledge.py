# knowledge.py - knowledge base lookup and upsert
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from config import db, logger, MATCH_ORDERS
from errors import StorageError
from models import ErrorDefinition


class ErrorMatcher:
    """Finds the stored error definition whose key text appears in a message.

    Matching is case-insensitive containment of the stored key text inside the
    incoming text. With ``match_order="first"`` the lowest id wins; with
    ``"longest"`` the longest key text wins and equal lengths fall back to the
    lowest id.
    """

    def __init__(self, match_order: str = "first"):
        if match_order not in MATCH_ORDERS:
            raise ValueError(f"unknown match order: {match_order!r}")
        self.match_order = match_order

    def find_match(self, service: str, error_text: Optional[str]) -> Optional[ErrorDefinition]:
        error_text = (error_text or "").strip()
        if not error_text:
            return None

        try:
            candidates = (
                ErrorDefinition.query.filter_by(service=service).order_by(ErrorDefinition.id.asc()).all()
            )
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("❌ Knowledge base read failed for service %s", service)
            raise StorageError("knowledge base unavailable") from e

        lowered = error_text.lower()
        matches = (c for c in candidates if c.key_text and c.key_text.lower() in lowered)
        if self.match_order == "first":
            return next(matches, None)

        best = None
        for candidate in matches:
            if best is None or len(candidate.key_text) > len(best.key_text):
                best = candidate
        return best


def upsert_definition(service, key_text, answer_en, answer_hi=None, meta=None, created_by_ai=False):
    """Insert or update the definition for (service, key_text). The caller commits."""
    key_text = (key_text or "").strip()
    if not key_text:
        raise ValueError("key_text required")

    definition = ErrorDefinition.query.filter_by(service=service, key_text=key_text).first()
    if definition is None:
        definition = ErrorDefinition(service=service, key_text=key_text)
        db.session.add(definition)

    definition.answer_en = (answer_en or "").strip()
    definition.answer_hi = (answer_hi or "").strip() or None
    if meta is not None:
        definition.meta = meta
    definition.created_by_ai = bool(created_by_ai)
    return definition
