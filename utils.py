# utils.py
import uuid
from functools import wraps

from flask import request, Response, current_app, g, session

from config import MAX_MESSAGE_CHARS
from errors import ValidationError

SESSION_ID_KEY = "assistant_session_id"


def require_basic_auth(func):
    @wraps(func)
    def wrapped(*args, **kwargs):
        auth = request.authorization
        user = current_app.config["ADMIN_USER"]
        password = current_app.config["ADMIN_PASS"]
        if not auth or auth.username != user or auth.password != password:
            return Response("Login required", 401, {"WWW-Authenticate": 'Basic realm="Login Required"'})
        return func(*args, **kwargs)
    return wrapped


def truncate(text, max_chars=MAX_MESSAGE_CHARS):
    if text and len(text) > max_chars:
        return text[:max_chars] + "...(truncated)"
    return text


def parse_help_request(data):
    """Validate a /help body and return (error_text, page_url, session_id)."""
    if not isinstance(data, dict):
        raise ValidationError("JSON object body required")

    error_text = data.get("error_text")
    if not isinstance(error_text, str) or not error_text.strip():
        raise ValidationError("error_text required", field="error_text")

    page_url = data.get("page_url")
    if page_url is not None and not isinstance(page_url, str):
        raise ValidationError("page_url must be a string", field="page_url")

    session_id = data.get("session_id")
    if session_id is not None and not isinstance(session_id, str):
        raise ValidationError("session_id must be a string", field="session_id")

    return error_text.strip(), (page_url or None), (session_id or None)


def get_current_user_id():
    """Authenticated user id from the host app (g.user_id) or the configured header."""
    user_id = getattr(g, "user_id", None)
    if user_id is not None:
        return user_id
    raw = request.headers.get(current_app.config["USER_ID_HEADER"], "").strip()
    if raw.isdigit():
        return int(raw)
    return None


def get_session_key(session_id=None):
    if session_id:
        return session_id
    key = session.get(SESSION_ID_KEY)
    if not key:
        key = uuid.uuid4().hex
        session[SESSION_ID_KEY] = key
    return key
