# classifier.py - deterministic input classification (no AI/ML, pattern matching only)
import re
from collections import namedtuple
from dataclasses import dataclass
from typing import Optional

from config import DEFAULT_CATEGORY_KEYWORDS

# ==== INPUT TYPES ====
TYPE_VALID = "valid"
TYPE_EMPTY = "empty"
TYPE_GREETING = "greeting"
TYPE_VAGUE = "vague"
TYPE_ABUSE_MILD = "abuse_mild"
TYPE_ABUSE_SEVERE = "abuse_severe"
TYPE_NOISE = "noise"
TYPE_ESCALATION_REQUEST = "escalation_request"

# ==== RESPONSE TEMPLATES (direct, no open questions) ====
EMPTY_RESPONSE = "Please type your issue message."
NOISE_RESPONSE = "I am ready to help. Please state your issue."
GREETING_RESPONSE = "Hello. Please state the issue you are facing."
VAGUE_RESPONSE = "Please specify the error message or the service (e.g., AEPS, PAN) you are having trouble with."
SEVERE_ABUSE_RESPONSE = "Support is available for technical issues. Please keep the conversation respectful."


def _compile(*patterns):
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


GREETING_PATTERNS = _compile(
    r"^(hi|hello|hey|hii+|helo|hlo|namaste|namaskar)[\s!.?]*$",
    r"^(good\s*(morning|afternoon|evening|night|day))[\s!.?]*$",
    r"^(howdy|sup|yo|hiya)[\s!.?]*$",
)

VAGUE_PATTERNS = _compile(
    r"^(help|help me|need help|i need help)[\s!.?]*$",
    r"^(issue|problem|error|not working)[\s!.?]*$",
    r"^(something (is )?(wrong|broken|not working))[\s!.?]*$",
    r"^(it'?s? not working)[\s!.?]*$",
    r"^(please help)[\s!.?]*$",
    r"^(kuch gadbad hai|kaam nahi kar raha)[\s!.?]*$",
)

NOISE_PATTERNS = _compile(
    r"^(test|testing|123|abc|xyz|qwerty|asdf)\s*$",
    r"^([a-z])\1{2,}$",  # 'aaaa'
    r"^[\W\d\s]+$",  # symbols, digits and whitespace only
    r"^.{1,2}$",
)

MILD_ABUSE_PATTERNS = _compile(
    r"\b(damn|crap|sucks|stupid|useless|rubbish|pathetic|worst)\b",
    r"\b(bakwas|bekaar|wahiyat|ghatiya)\b",
)

SEVERE_ABUSE_PATTERNS = _compile(
    r"\b(f+u+c+k+|shit|bastard|bitch|ass+hole)\b",
    r"\b(kill|murder|die|threat)\b",
    r"\b(madarch[o0]d|bhench[o0]d|chutiya|gandu|harami|saala|kutta|kamina)\b",
    r"\b(randi|hijra|chakka)\b",
)

ESCALATION_PATTERNS = _compile(
    r"\b(talk to (a\s*)?(human|agent|person|support|executive))\b",
    r"\b(call me|call back|contact me)\b",
    r"\b(escalate|escalation|raise (a\s*)?complaint)\b",
    r"\b(speak to (a\s*)?(manager|supervisor))\b",
    r"\b(need (a\s*)?(human|real person))\b",
    r"\b(this (is\s*)?(not helping|useless))\b",
)


@dataclass(frozen=True)
class Verdict:
    type: str
    should_process: bool
    canned_response: Optional[str] = None
    category: Optional[str] = None
    should_escalate: bool = False


Rule = namedtuple("Rule", ["matches", "verdict"])


def matches_any(text: str, patterns) -> bool:
    return any(p.search(text) for p in patterns)


def _is_empty(text: str) -> bool:
    return not text


def _matcher(patterns):
    return lambda text: matches_any(text, patterns)


# Priority chain: the first rule that matches decides, later rules never run.
RULES = (
    Rule(_is_empty, Verdict(TYPE_EMPTY, False, EMPTY_RESPONSE)),
    Rule(_matcher(SEVERE_ABUSE_PATTERNS), Verdict(TYPE_ABUSE_SEVERE, False, SEVERE_ABUSE_RESPONSE)),
    Rule(_matcher(NOISE_PATTERNS), Verdict(TYPE_NOISE, False, NOISE_RESPONSE)),
    Rule(_matcher(GREETING_PATTERNS), Verdict(TYPE_GREETING, False, GREETING_RESPONSE)),
    Rule(_matcher(VAGUE_PATTERNS), Verdict(TYPE_VAGUE, False, VAGUE_RESPONSE)),
    Rule(_matcher(ESCALATION_PATTERNS), Verdict(TYPE_ESCALATION_REQUEST, True, should_escalate=True)),
    Rule(_matcher(MILD_ABUSE_PATTERNS), Verdict(TYPE_ABUSE_MILD, True)),
)


class InputClassifier:
    """Sorts user input into actionable types.

    The result depends only on the trimmed text and the category table the
    classifier was built with.
    """

    def __init__(self, category_keywords=None):
        if category_keywords is None:
            category_keywords = DEFAULT_CATEGORY_KEYWORDS
        self.category_keywords = {
            category: tuple(k.lower() for k in keywords) for category, keywords in category_keywords.items()
        }

    def classify(self, text: Optional[str]) -> Verdict:
        trimmed = (text or "").strip()
        for rule in RULES:
            if rule.matches(trimmed):
                return rule.verdict
        return Verdict(TYPE_VALID, True, category=self.detect_category(trimmed))

    def detect_category(self, text: str) -> Optional[str]:
        lowered = text.lower()
        for category, keywords in self.category_keywords.items():
            if any(keyword in lowered for keyword in keywords):
                return category
        return None


_default_classifier = InputClassifier()


def classify(text: Optional[str]) -> Verdict:
    """Classify *text* with the default category table."""
    return _default_classifier.classify(text)
