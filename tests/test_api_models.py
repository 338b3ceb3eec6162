"""Tests for response parsing helpers."""

from gemini_client import GenerationResponse, Message, Role
from gemini_client.models.api_models import FunctionCallPart, RawPart, TextPart


RESPONSE = {
    "candidates": [
        {
            "content": {
                "role": "model",
                "parts": [
                    {"text": "Considering the units...", "thought": True},
                    {"text": "It is 21"},
                    {"text": " degrees."},
                    {"functionCall": {"name": "log_answer", "args": {"value": 21}}},
                    {"executableCode": {"language": "PYTHON", "code": "print(21)"}},
                ],
            },
            "finishReason": "STOP",
            "safetyRatings": [{"category": "HARM_CATEGORY_HARASSMENT", "probability": "NEGLIGIBLE"}],
            "index": 0,
        },
        {
            "content": {"role": "model", "parts": [{"functionCall": {"name": "second", "args": {}}}]},
            "index": 1,
        },
    ],
    "usageMetadata": {"promptTokenCount": 5, "candidatesTokenCount": 7, "thoughtsTokenCount": 3,
                      "totalTokenCount": 15},
    "modelVersion": "gemini-2.0-flash",
}


def test_text_excludes_thoughts():
    response = GenerationResponse.model_validate(RESPONSE)
    assert response.text() == "It is 21 degrees."
    assert response.thoughts() == "Considering the units..."


def test_parts_keep_their_kind():
    parts = GenerationResponse.model_validate(RESPONSE).candidates[0].content.parts
    assert isinstance(parts[0], TextPart)
    assert isinstance(parts[3], FunctionCallPart)
    assert isinstance(parts[4], RawPart)
    assert parts[4].model_extra == {"executableCode": {"language": "PYTHON", "code": "print(21)"}}


def test_function_calls_cover_all_candidates():
    calls = GenerationResponse.model_validate(RESPONSE).function_calls()
    assert [c.name for c in calls] == ["log_answer", "second"]
    assert calls[0].get("value") == 21


def test_metadata():
    response = GenerationResponse.model_validate(RESPONSE)
    assert response.finish_reason == "STOP"
    assert response.usage_metadata.total_token_count == 15
    assert response.usage_metadata.thoughts_token_count == 3
    assert response.model_version == "gemini-2.0-flash"
    assert response.candidates[0].safety_ratings[0].probability == "NEGLIGIBLE"


def test_empty_response():
    response = GenerationResponse.model_validate({})
    assert response.text() == ""
    assert response.thoughts() == ""
    assert response.function_calls() == []
    assert response.finish_reason is None


def test_blocked_prompt_has_no_candidates():
    response = GenerationResponse.model_validate({"promptFeedback": {"blockReason": "SAFETY"}})
    assert response.prompt_feedback.block_reason == "SAFETY"
    assert response.text() == ""


def test_message_constructors():
    assert Message.user("hi").role == Role.USER
    assert Message.model("hello").text == "hello"
    assert Message.function("f", {"ok": True}).role == Role.FUNCTION
    assert Message.system("rules").model_dump(mode="json", exclude_none=True) == {
        "parts": [{"text": "rules"}],
        "role": "system",
    }
