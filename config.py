# config.py - configuration and shared extensions

import os
import logging
from dataclasses import dataclass, field

from flask_sqlalchemy import SQLAlchemy
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# ==== LOGGING ====
logger = logging.getLogger("assistant")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# ==== SERVER ====
PORT = int(os.getenv("PORT", 5000))
SECRET_KEY = os.getenv("APP_SECRET_KEY", "dev-secret-change-me")
ALLOWED_ORIGIN = os.getenv("ALLOWED_ORIGIN", "*")
ADMIN_USER = os.getenv("ADMIN_USER", "admin")
ADMIN_PASS = os.getenv("ADMIN_PASS", "changeme")

# ==== DATABASE ====
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///assistant.db")
db = SQLAlchemy()

# ==== RATE LIMITER ====
RATE_LIMIT = os.getenv("RATE_LIMIT", "60 per minute")
HELP_RATE_LIMIT = os.getenv("HELP_RATE_LIMIT", "20 per minute")
RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
limiter = Limiter(key_func=get_remote_address, default_limits=[RATE_LIMIT])

# ==== ASSISTANT ====
DEFAULT_SERVICE = os.getenv("DEFAULT_SERVICE", "AEPS")
SESSION_STORE = os.getenv("SESSION_STORE", "cookie")  # 'cookie' or 'memory'
USER_ID_HEADER = os.getenv("USER_ID_HEADER", "X-User-Id")
KB_MATCH_ORDER = os.getenv("KB_MATCH_ORDER", "first")  # 'first' or 'longest'

# ==== CONSTANTS ====
MAX_MESSAGE_CHARS = 20000
MAX_PAGE_URL_CHARS = 1024
MATCH_ORDERS = ("first", "longest")

# Checked in order; the first category with a keyword found in the text wins.
DEFAULT_CATEGORY_KEYWORDS = {
    "PAN": ("pan", "nsdl", "uti", "correction", "pan card"),
    "RECHARGE": ("recharge", "topup", "jio", "airtel", "vi", "vodafone", "dth", "mobile"),
    "AEPS": ("aeps", "withdrawal", "balance enquiry", "mini statement", "fingerprint", "biometric", "aadhaar pay"),
    "PAYOUT": ("payout", "transfer", "imps", "neft", "bank", "account", "beneficiary"),
    "KYC": ("kyc", "document", "aadhaar", "verification", "upload", "ekyc"),
    "IRCTC": ("irctc", "train", "booking", "cancellation", "ticket", "railway"),
}


@dataclass(frozen=True)
class AssistantConfig:
    """Settings the triage pipeline needs, separate from the Flask config."""

    default_service: str = DEFAULT_SERVICE
    category_keywords: dict = field(default_factory=lambda: dict(DEFAULT_CATEGORY_KEYWORDS))
    match_order: str = "first"

    def __post_init__(self):
        if self.match_order not in MATCH_ORDERS:
            raise ValueError(f"match_order must be one of {MATCH_ORDERS}, got {self.match_order!r}")

    @classmethod
    def from_mapping(cls, mapping) -> "AssistantConfig":
        return cls(
            default_service=mapping.get("DEFAULT_SERVICE", DEFAULT_SERVICE),
            category_keywords=dict(mapping.get("CATEGORY_KEYWORDS", DEFAULT_CATEGORY_KEYWORDS)),
            match_order=mapping.get("KB_MATCH_ORDER", "first"),
        )


def flask_settings() -> dict:
    """Flask config values, read from the environment at import time."""
    return {
        "SECRET_KEY": SECRET_KEY,
        "SQLALCHEMY_DATABASE_URI": DATABASE_URL,
        "SQLALCHEMY_TRACK_MODIFICATIONS": False,
        "RATELIMIT_STORAGE_URI": RATELIMIT_STORAGE_URI,
        "ALLOWED_ORIGIN": ALLOWED_ORIGIN,
        "ADMIN_USER": ADMIN_USER,
        "ADMIN_PASS": ADMIN_PASS,
        "DEFAULT_SERVICE": DEFAULT_SERVICE,
        "CATEGORY_KEYWORDS": DEFAULT_CATEGORY_KEYWORDS,
        "KB_MATCH_ORDER": KB_MATCH_ORDER,
        "SESSION_STORE": SESSION_STORE,
        "USER_ID_HEADER": USER_ID_HEADER,
        "LOG_LEVEL": LOG_LEVEL,
    }
