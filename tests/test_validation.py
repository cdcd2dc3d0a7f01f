import asyncio
import json

import pytest

from career_bot.validation import NEGATIVE, POSITIVE, ValidationKind, validate
from tests.fakes import FakeLLM


def _validate(kind, text, llm):
    return asyncio.run(validate(kind, text, llm))


def test_short_name_skips_the_model():
    llm = FakeLLM()
    result = _validate(ValidationKind.NAME, "  Asha Rao ", llm)
    assert result.ok and result.canonical == "Asha Rao"
    assert llm.calls == []


def test_long_name_is_extracted():
    llm = FakeLLM(extract_name="Asha")
    result = _validate("name", "hi my name is Asha", llm)
    assert result.canonical == "Asha"
    assert llm.called("extract_name") == [("hi my name is Asha",)]


def test_empty_extraction_keeps_the_input():
    llm = FakeLLM(extract_name="  ")
    result = _validate(ValidationKind.NAME, "they call me A.R.", llm)
    assert result.ok and result.canonical == "they call me A.R."


def test_stream_accepted_with_canonical_name():
    llm = FakeLLM(check_stream=json.dumps({"isValid": True, "streamName": "Science"}))
    result = _validate(ValidationKind.STREAM, "sci with maths", llm)
    assert result.ok and result.canonical == "Science"


def test_stream_rejected():
    llm = FakeLLM(check_stream=json.dumps({"isValid": False, "streamName": ""}))
    assert not _validate(ValidationKind.STREAM, "pizza", llm).ok


def test_malformed_classifier_output_is_a_rejection():
    llm = FakeLLM(check_stream="not json at all")
    result = _validate(ValidationKind.STREAM, "science", llm)
    assert not result.ok and result.canonical is None


def test_valid_flag_with_blank_name_is_a_rejection():
    llm = FakeLLM(check_domain=json.dumps({"isValid": True, "domainName": " "}))
    assert not _validate(ValidationKind.DOMAIN, "something in computers maybe", llm).ok


def test_short_domain_skips_the_model():
    llm = FakeLLM()
    result = _validate(ValidationKind.DOMAIN, "Graphic Design", llm)
    assert result.ok and result.canonical == "Graphic Design"
    assert llm.called("check_domain") == []


def test_long_domain_is_normalized():
    llm = FakeLLM(check_domain=json.dumps({"isValid": True, "domainName": "Data Science"}))
    result = _validate(ValidationKind.DOMAIN, "i like working with data and statistics", llm)
    assert result.canonical == "Data Science"


def test_empty_domain_rejected():
    llm = FakeLLM()
    assert not _validate(ValidationKind.DOMAIN, "   ", llm).ok
    assert llm.calls == []


@pytest.mark.parametrize(
    "reply,expected",
    [("POSITIVE", POSITIVE), ("positive\n", POSITIVE), ("NEGATIVE", NEGATIVE), ("maybe", NEGATIVE)],
)
def test_sentiment_only_exact_positive_counts(reply, expected):
    result = _validate(ValidationKind.SENTIMENT, "sounds good", FakeLLM(classify_feedback=reply))
    assert result.ok
    assert result.canonical == expected
    assert result.is_positive is (expected == POSITIVE)


def test_transport_errors_propagate():
    llm = FakeLLM(check_stream=ConnectionError("backend down"))
    with pytest.raises(ConnectionError):
        _validate(ValidationKind.STREAM, "science", llm)
