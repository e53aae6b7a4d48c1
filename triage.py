# triage.py - classify, match, loop-guard and record a single help request
from dataclasses import dataclass, asdict
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from classifier import InputClassifier, TYPE_ESCALATION_REQUEST
from config import db, logger, AssistantConfig, MAX_PAGE_URL_CHARS
from errors import StorageError
from knowledge import ErrorMatcher
from loop_guard import LoopGuard, CANNED_NAMESPACE, ANSWER_NAMESPACE, fingerprint
from models import Conversation, Message
from utils import truncate

SOURCE_KB = "kb"
SOURCE_UNKNOWN = "unknown"
SOURCE_EXIT = "exit"
SOURCE_ESCALATION = "escalation"
INPUT_TYPE_LOOP_EXIT = "loop_exit"

EXIT_MESSAGE = (
    "I've shared all available guidance for this issue.\n"
    "Please contact support if further assistance is required."
)
ESCALATION_MESSAGE_EN = (
    "Your request has been noted. Please use the 'Raise Ticket' option to connect with our support team, "
    "or call our helpline for immediate assistance."
)
ESCALATION_MESSAGE_HI = (
    "आपका अनुरोध दर्ज किया गया है। कृपया 'टिकट बनाएं' विकल्प का उपयोग करें "
    "या तुरंत सहायता के लिए हमारी हेल्पलाइन पर कॉल करें।"
)
FALLBACK_MESSAGE_EN = (
    "this specific error is not yet documented.\n\n"
    "If this issue is urgent, please use the 'Raise Ticket' option to contact support."
)
FALLBACK_MESSAGE_HI = "यह त्रुटि अभी दस्तावेज़ में नहीं है। कृपया 'टिकट बनाएं' विकल्प का उपयोग करें।"


@dataclass
class TriageResponse:
    source: str
    answer_en: str
    input_type: str
    answer_hi: Optional[str] = None
    category: Optional[str] = None
    conversation_id: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)


def exit_response() -> TriageResponse:
    return TriageResponse(source=SOURCE_EXIT, answer_en=EXIT_MESSAGE, input_type=INPUT_TYPE_LOOP_EXIT)


def compose_answer(category, definition):
    """Build (answer_en, answer_hi, source) for a knowledge match or its absence."""
    if definition is not None:
        prefix = f"I understand you are facing a {category} issue.\n\n" if category else ""
        return prefix + definition.answer_en, definition.answer_hi, SOURCE_KB

    if category:
        answer_en = f"I understand you are facing a {category} issue, but {FALLBACK_MESSAGE_EN}"
    else:
        answer_en = FALLBACK_MESSAGE_EN[0].upper() + FALLBACK_MESSAGE_EN[1:]
    return answer_en, FALLBACK_MESSAGE_HI, SOURCE_UNKNOWN


def record_turn(service, error_text, page_url, user_id, verdict, response, matched_id):
    """Write the conversation and both of its messages in one transaction."""
    conversation = Conversation(
        user_id=user_id,
        service=service,
        status="resolved",
        page_url=page_url[:MAX_PAGE_URL_CHARS] if page_url else None,
        meta={
            "raw_error_text": error_text,
            "input_type": verdict.type,
            "category": verdict.category,
        },
    )
    conversation.messages.append(
        Message(
            sender_type="user",
            body=truncate(error_text),
            data={"input_type": verdict.type, "category": verdict.category},
        )
    )
    conversation.messages.append(
        Message(
            sender_type="ai",
            body=truncate("\n".join(part for part in (response.answer_en, response.answer_hi) if part)),
            data={
                "source": response.source,
                "input_type": verdict.type,
                "category": verdict.category,
                "matched_error_id": matched_id,
            },
        )
    )
    try:
        db.session.add(conversation)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("❌ Failed to record conversation:")
        raise StorageError("could not record conversation") from e
    return conversation.id


class TriageController:
    def __init__(self, loop_guard: LoopGuard, config: AssistantConfig = None, classifier=None, matcher=None):
        self.config = config or AssistantConfig()
        self.loop_guard = loop_guard
        self.classifier = classifier or InputClassifier(self.config.category_keywords)
        self.matcher = matcher or ErrorMatcher(self.config.match_order)

    def handle(self, raw_text, page_url, session_key, user_id=None) -> TriageResponse:
        error_text = (raw_text or "").strip()
        service = self.config.default_service
        verdict = self.classifier.classify(error_text)
        logger.debug("triage session=%s type=%s category=%s", session_key, verdict.type, verdict.category)

        # Deflections are never recorded
        if not verdict.should_process:
            if self.loop_guard.check_and_update(session_key, verdict.canned_response, CANNED_NAMESPACE):
                logger.debug("triage session=%s repeated canned response, exiting", session_key)
                return exit_response()
            return TriageResponse(source=verdict.type, answer_en=verdict.canned_response, input_type=verdict.type)

        if verdict.should_escalate:
            return TriageResponse(
                source=SOURCE_ESCALATION,
                answer_en=ESCALATION_MESSAGE_EN,
                answer_hi=ESCALATION_MESSAGE_HI,
                input_type=TYPE_ESCALATION_REQUEST,
            )

        definition = self.matcher.find_match(service, error_text)
        answer_en, answer_hi, source = compose_answer(verdict.category, definition)

        if self.loop_guard.check_and_update(session_key, fingerprint(answer_en), ANSWER_NAMESPACE):
            logger.debug("triage session=%s repeated answer, exiting", session_key)
            return exit_response()

        response = TriageResponse(
            source=source,
            answer_en=answer_en,
            answer_hi=answer_hi,
            input_type=verdict.type,
            category=verdict.category,
        )
        matched_id = definition.id if definition is not None else None
        try:
            response.conversation_id = record_turn(
                service, error_text, page_url, user_id, verdict, response, matched_id
            )
        except StorageError:
            # the answer was never delivered, so a retry is not a repeat
            self.loop_guard.reset(session_key, ANSWER_NAMESPACE)
            raise
        logger.info("✅ Triage answered from %s (conversation %s)", source, response.conversation_id)
        return response
