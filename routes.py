# routes.py
from flask import Blueprint, current_app, jsonify, request

from config import db, limiter, logger, HELP_RATE_LIMIT
from errors import StorageError, ValidationError
from models import Conversation, Message
from utils import get_current_user_id, get_session_key, parse_help_request, require_basic_auth

bp = Blueprint("assistant", __name__)

RETRY_MESSAGE = "We could not process your request right now. Please try again in a moment."


@bp.route("/", methods=["GET"])
def home():
    return jsonify({"status": "ok", "message": "Error help assistant running"})


@bp.route("/healthz", methods=["GET"])
def healthz():
    return jsonify({"status": "ok"})


@bp.route("/help", methods=["POST"])
@limiter.limit(HELP_RATE_LIMIT)
def help_request():
    try:
        data = request.get_json(silent=True)
        try:
            error_text, page_url, session_id = parse_help_request(data)
        except ValidationError as e:
            return jsonify({"error": str(e), "field": e.field}), 400

        controller = current_app.extensions["triage"]
        result = controller.handle(
            error_text,
            page_url,
            session_key=get_session_key(session_id),
            user_id=get_current_user_id(),
        )
        return jsonify(result.to_dict())
    except StorageError:
        logger.exception("❌ /help storage error:")
        return jsonify({"error": "storage_error", "message": RETRY_MESSAGE}), 503
    except Exception:
        logger.exception("❌ Unexpected /help error:")
        return jsonify({"error": "server_error", "message": RETRY_MESSAGE}), 500


# Admin endpoints
@bp.route("/admin/conversations", methods=["GET"])
@require_basic_auth
def admin_conversations():
    try:
        conversations = Conversation.query.order_by(Conversation.id.desc()).limit(200).all()
        out = []
        for c in conversations:
            last_msg = Message.query.filter_by(conversation_id=c.id).order_by(Message.id.desc()).first()
            out.append({
                "conversation_id": c.id,
                "user_id": c.user_id,
                "service": c.service,
                "status": c.status,
                "page_url": c.page_url,
                "input_type": (c.meta or {}).get("input_type"),
                "category": (c.meta or {}).get("category"),
                "created_at": c.created_at.isoformat() if c.created_at else None,
                "last_message": last_msg.body if last_msg else None,
            })
        return jsonify(out)
    except Exception:
        logger.exception("❌ admin_conversations error:")
        return jsonify({"error": "server_error"}), 500


@bp.route("/admin/conversation/<int:conversation_id>", methods=["GET"])
@require_basic_auth
def admin_view_conversation(conversation_id):
    conversation = db.get_or_404(Conversation, conversation_id)
    return jsonify({
        "conversation": {
            "conversation_id": conversation.id,
            "user_id": conversation.user_id,
            "service": conversation.service,
            "status": conversation.status,
            "page_url": conversation.page_url,
            "meta": conversation.meta,
            "created_at": conversation.created_at.isoformat() if conversation.created_at else None,
        },
        "messages": [
            {
                "sender_type": m.sender_type,
                "body": m.body,
                "data": m.data,
                "time": m.created_at.isoformat() if m.created_at else None,
            }
            for m in conversation.messages
        ],
    })
