"""Tests for deterministic input classification."""

import pytest

from classifier import (
    GREETING_RESPONSE,
    InputClassifier,
    NOISE_RESPONSE,
    SEVERE_ABUSE_RESPONSE,
    TYPE_ABUSE_MILD,
    TYPE_ABUSE_SEVERE,
    TYPE_EMPTY,
    TYPE_ESCALATION_REQUEST,
    TYPE_GREETING,
    TYPE_NOISE,
    TYPE_VAGUE,
    TYPE_VALID,
    VAGUE_RESPONSE,
    classify,
)


@pytest.mark.parametrize("text", ["", "   ", "\n\t ", None])
def test_empty_input(text) -> None:
    verdict = classify(text)
    assert verdict.type == TYPE_EMPTY
    assert verdict.should_process is False
    assert verdict.canned_response == "Please type your issue message."


@pytest.mark.parametrize("text", ["what the fuck", "you BASTARD", "I will kill you", "chutiya system"])
def test_severe_abuse(text) -> None:
    verdict = classify(text)
    assert verdict.type == TYPE_ABUSE_SEVERE
    assert verdict.should_process is False
    assert verdict.canned_response == SEVERE_ABUSE_RESPONSE


@pytest.mark.parametrize("text", ["test", "Testing", "123", "qwerty ", "aaaa", "ZZZZZ", "!!!???", "42 %%", "ok", "x"])
def test_noise(text) -> None:
    verdict = classify(text)
    assert verdict.type == TYPE_NOISE
    assert verdict.should_process is False
    assert verdict.canned_response == NOISE_RESPONSE


@pytest.mark.parametrize("text", ["hello", "Hi!", "hiiii", "namaste.", "Good Morning!!", "hey?"])
def test_greeting(text) -> None:
    verdict = classify(text)
    assert verdict.type == TYPE_GREETING
    assert verdict.should_process is False
    assert verdict.canned_response == GREETING_RESPONSE


@pytest.mark.parametrize(
    "text", ["help", "I need help!", "not working", "Something is wrong", "its not working", "kuch gadbad hai"]
)
def test_vague(text) -> None:
    verdict = classify(text)
    assert verdict.type == TYPE_VAGUE
    assert verdict.should_process is False
    assert verdict.canned_response == VAGUE_RESPONSE


@pytest.mark.parametrize(
    "text", ["talk to a human", "please call me back", "I want to escalate this", "this is not helping at all"]
)
def test_escalation_request(text) -> None:
    verdict = classify(text)
    assert verdict.type == TYPE_ESCALATION_REQUEST
    assert verdict.should_process is True
    assert verdict.should_escalate is True
    assert verdict.canned_response is None


def test_mild_abuse_is_processed() -> None:
    verdict = classify("this portal is stupid, withdrawal failed")
    assert verdict.type == TYPE_ABUSE_MILD
    assert verdict.should_process is True
    assert verdict.should_escalate is False
    assert verdict.canned_response is None


def test_valid_with_category() -> None:
    verdict = classify("Error: fingerprint mismatch detected at step 3")
    assert verdict.type == TYPE_VALID
    assert verdict.should_process is True
    assert verdict.category == "AEPS"


def test_valid_without_category() -> None:
    verdict = classify("xyz-unmapped-code-99")
    assert verdict.type == TYPE_VALID
    assert verdict.category is None


def test_first_category_in_table_wins() -> None:
    # 'correction' (PAN) and 'bank' (PAYOUT) both appear; PAN is listed first
    assert classify("Correction request rejected by bank").category == "PAN"


def test_category_is_case_insensitive() -> None:
    assert classify("IRCTC Booking Failed").category == "IRCTC"


class TestPriority:
    def test_severe_abuse_beats_greeting(self) -> None:
        assert classify("hello bastard").type == TYPE_ABUSE_SEVERE

    def test_noise_beats_greeting(self) -> None:
        # two characters is noise even though 'hi' is a greeting
        assert classify("hi").type == TYPE_NOISE

    def test_escalation_beats_mild_abuse(self) -> None:
        assert classify("this is useless, talk to a human").type == TYPE_ESCALATION_REQUEST

    def test_greeting_with_content_is_not_greeting(self) -> None:
        assert classify("hello my aeps withdrawal failed").type == TYPE_VALID


def test_classification_is_pure() -> None:
    inputs = ["hello", "talk to a human", "fingerprint mismatch", "", "test", "kyc upload failed"]
    first = [classify(t) for t in inputs]
    second = [classify(t) for t in reversed(inputs)]
    assert first == list(reversed(second))


def test_custom_category_table() -> None:
    classifier = InputClassifier({"GST": ("gstin", "gst return")})
    assert classifier.classify("GSTIN validation failed").category == "GST"
    assert classifier.classify("fingerprint mismatch error").category is None

