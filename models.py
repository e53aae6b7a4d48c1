# models.py
import datetime
from config import db, DEFAULT_SERVICE, MAX_PAGE_URL_CHARS

SENDER_TYPES = ("user", "ai", "system")


def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


class ErrorDefinition(db.Model):
    __tablename__ = "error_definitions"
    __table_args__ = (db.UniqueConstraint("service", "key_text", name="uq_error_definitions_service_key"),)
    id = db.Column(db.Integer, primary_key=True)
    service = db.Column(db.String(64), nullable=False, default=DEFAULT_SERVICE, index=True)
    key_text = db.Column(db.String(512), nullable=False)
    answer_en = db.Column(db.Text, nullable=False)
    answer_hi = db.Column(db.Text)
    meta = db.Column(db.JSON)
    created_by_ai = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<ErrorDefinition {self.id} {self.service}:{self.key_text!r}>"


class Conversation(db.Model):
    __tablename__ = "conversations"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, index=True)
    service = db.Column(db.String(64), nullable=False, default=DEFAULT_SERVICE)
    status = db.Column(db.String(32), nullable=False, default="resolved")
    page_url = db.Column(db.String(MAX_PAGE_URL_CHARS))
    meta = db.Column(db.JSON)
    created_at = db.Column(db.DateTime, default=_utcnow)
    messages = db.relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="Message.id",
    )


class Message(db.Model):
    __tablename__ = "messages"
    id = db.Column(db.Integer, primary_key=True)
    conversation_id = db.Column(
        db.Integer, db.ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_type = db.Column(db.Enum(*SENDER_TYPES, name="sender_type"), nullable=False)
    body = db.Column(db.Text)
    data = db.Column(db.JSON)
    created_at = db.Column(db.DateTime, default=_utcnow)
    conversation = db.relationship("Conversation", back_populates="messages")
