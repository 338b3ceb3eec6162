"""Tests for the fluent request builder."""

import base64

import pytest
from pydantic import ValidationError as PydanticValidationError

from gemini_client import (
    ContentBuilder,
    FunctionDeclaration,
    FunctionParameters,
    GenerationConfig,
    HarmBlockThreshold,
    HarmCategory,
    Message,
    PropertyDetails,
    Role,
    ValidationError,
)


def _weather_function() -> FunctionDeclaration:
    return FunctionDeclaration(
        name="get_weather",
        description="Get the current weather for a location",
        parameters=FunctionParameters.object().with_property(
            "location", PropertyDetails.string("The city, e.g. Paris"), True
        ),
    )


class TestValidation:
    def test_build_without_messages_fails(self):
        """A request needs at least one message."""
        with pytest.raises(ValidationError):
            ContentBuilder().build()

    def test_system_prompt_alone_is_not_enough(self):
        with pytest.raises(ValidationError):
            ContentBuilder().with_system_prompt("be brief").build()

    def test_out_of_range_parameter_fails_on_build(self):
        builder = ContentBuilder().with_user_message("hi").with_temperature(3.5)
        with pytest.raises(ValidationError) as exc_info:
            builder.build()
        assert isinstance(exc_info.value.__cause__, PydanticValidationError)

    def test_unknown_function_calling_mode_fails(self):
        builder = ContentBuilder().with_user_message("hi").with_function_calling_mode("sometimes")
        with pytest.raises(ValidationError):
            builder.build()

    def test_function_response_str_rejects_invalid_json(self):
        with pytest.raises(ValidationError):
            ContentBuilder().with_function_response_str("get_weather", "{not json")

    @pytest.mark.asyncio
    async def test_execute_requires_bound_client(self):
        with pytest.raises(ValidationError):
            await ContentBuilder().with_user_message("hi").execute()


class TestMessages:
    def test_messages_keep_append_order(self):
        request = (
            ContentBuilder()
            .with_user_message("first")
            .with_model_message("second")
            .with_user_message("third")
            .build()
        )
        assert [m.text for m in request.contents] == ["first", "second", "third"]
        assert [m.role for m in request.contents] == [Role.USER, Role.MODEL, Role.USER]

    def test_with_messages_appends_in_order(self):
        request = (
            ContentBuilder()
            .with_user_message("a")
            .with_messages([Message.model("b"), Message.user("c")])
            .build()
        )
        assert [m.text for m in request.contents] == ["a", "b", "c"]

    def test_system_prompt_last_write_wins(self):
        request = (
            ContentBuilder()
            .with_system_prompt("first prompt")
            .with_user_message("hi")
            .with_system_prompt("second prompt")
            .build()
        )
        assert request.system_prompt == "second prompt"
        assert request.to_payload()["systemInstruction"] == {"parts": [{"text": "second prompt"}]}

    def test_system_role_message_sets_system_prompt(self):
        request = ContentBuilder().with_message(Message.system("rules")).with_user_message("hi").build()
        assert request.system_prompt == "rules"
        assert len(request.contents) == 1

    def test_payload_contents_shape(self):
        payload = ContentBuilder().with_user_message("hello").build().to_payload()
        assert payload == {"contents": [{"parts": [{"text": "hello"}], "role": "user"}]}

    def test_function_response_message(self):
        payload = (
            ContentBuilder()
            .with_user_message("weather?")
            .with_function_response("get_weather", {"temp": 21})
            .build()
            .to_payload()
        )
        assert payload["contents"][1] == {
            "parts": [{"functionResponse": {"name": "get_weather", "response": {"temp": 21}}}],
            "role": "function",
        }

    def test_inline_data_attaches_to_last_user_message(self):
        request = (
            ContentBuilder()
            .with_user_message("what is this?")
            .with_inline_data("image/png", b"\x89PNG")
            .build()
        )
        assert len(request.contents) == 1
        parts = request.to_payload()["contents"][0]["parts"]
        assert parts[0] == {"text": "what is this?"}
        assert parts[1] == {
            "inlineData": {"mimeType": "image/png", "data": base64.b64encode(b"\x89PNG").decode("ascii")}
        }

    def test_inline_data_after_model_turn_starts_user_message(self):
        request = (
            ContentBuilder()
            .with_user_message("hi")
            .with_model_message("hello")
            .with_inline_data("image/jpeg", "AAAA")
            .build()
        )
        assert len(request.contents) == 3
        assert request.contents[-1].role == Role.USER


class TestParameters:
    def test_generation_parameters_serialize_camel_case(self):
        payload = (
            ContentBuilder()
            .with_user_message("hi")
            .with_temperature(0.3)
            .with_top_k(40)
            .with_max_output_tokens(256)
            .with_stop_sequences(["END"])
            .build()
            .to_payload()
        )
        assert payload["generationConfig"] == {
            "temperature": 0.3,
            "topK": 40,
            "maxOutputTokens": 256,
            "stopSequences": ["END"],
        }

    def test_parameter_last_write_wins(self):
        request = ContentBuilder().with_user_message("hi").with_temperature(0.2).with_temperature(0.9).build()
        assert request.generation_config.temperature == 0.9

    def test_generation_config_then_override(self):
        request = (
            ContentBuilder()
            .with_user_message("hi")
            .with_generation_config(GenerationConfig(temperature=0.5, top_p=0.9))
            .with_temperature(0.1)
            .build()
        )
        assert request.to_payload()["generationConfig"] == {"temperature": 0.1, "topP": 0.9}

    def test_no_generation_config_when_unset(self):
        payload = ContentBuilder().with_user_message("hi").build().to_payload()
        assert "generationConfig" not in payload
        assert "tools" not in payload
        assert "safetySettings" not in payload

    def test_structured_output_and_thinking(self):
        schema = {"type": "OBJECT", "properties": {"name": {"type": "STRING"}}}
        payload = (
            ContentBuilder()
            .with_user_message("hi")
            .with_response_mime_type("application/json")
            .with_response_schema(schema)
            .with_thinking_budget(1024, include_thoughts=True)
            .build()
            .to_payload()
        )
        assert payload["generationConfig"]["responseMimeType"] == "application/json"
        assert payload["generationConfig"]["responseSchema"] == schema
        assert payload["generationConfig"]["thinkingConfig"] == {"includeThoughts": True, "thinkingBudget": 1024}

    def test_safety_settings_append(self):
        payload = (
            ContentBuilder()
            .with_user_message("hi")
            .with_safety_setting(HarmCategory.HARASSMENT, HarmBlockThreshold.BLOCK_ONLY_HIGH)
            .with_safety_setting("HARM_CATEGORY_HATE_SPEECH", "BLOCK_NONE")
            .build()
            .to_payload()
        )
        assert payload["safetySettings"] == [
            {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ONLY_HIGH"},
            {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
        ]


class TestTools:
    def test_tools_append_in_order(self):
        payload = (
            ContentBuilder()
            .with_user_message("hi")
            .with_function(_weather_function())
            .with_google_search()
            .build()
            .to_payload()
        )
        assert payload["tools"] == [
            {
                "functionDeclarations": [
                    {
                        "name": "get_weather",
                        "description": "Get the current weather for a location",
                        "parameters": {
                            "type": "OBJECT",
                            "properties": {"location": {"type": "STRING", "description": "The city, e.g. Paris"}},
                            "required": ["location"],
                        },
                    }
                ]
            },
            {"googleSearch": {}},
        ]

    def test_function_calling_mode(self):
        payload = (
            ContentBuilder()
            .with_user_message("hi")
            .with_function(_weather_function())
            .with_function_calling_mode("any", allowed_function_names=["get_weather"])
            .build()
            .to_payload()
        )
        assert payload["toolConfig"] == {
            "functionCallingConfig": {"mode": "ANY", "allowedFunctionNames": ["get_weather"]}
        }

    def test_code_execution_tool(self):
        payload = ContentBuilder().with_user_message("plot it").with_code_execution().build().to_payload()
        assert payload["tools"] == [{"codeExecution": {}}]


class TestImmutability:
    def test_later_builder_calls_do_not_touch_built_request(self):
        builder = ContentBuilder().with_user_message("one").with_temperature(0.4)
        request = builder.build()
        builder.with_user_message("two").with_temperature(1.0).with_system_prompt("late").with_google_search()

        assert [m.text for m in request.contents] == ["one"]
        assert request.generation_config.temperature == 0.4
        assert request.system_prompt is None
        assert request.tools == ()

    def test_request_rejects_assignment(self):
        request = ContentBuilder().with_user_message("one").build()
        with pytest.raises(PydanticValidationError):
            request.system_instruction = None

    def test_mutating_declaration_after_build_does_not_leak(self):
        params = FunctionParameters.object()
        builder = ContentBuilder().with_user_message("hi").with_function(
            FunctionDeclaration(name="f", description="d", parameters=params)
        )
        request = builder.build()
        builder._tools[0].function_declarations[0].parameters.with_property("x", PropertyDetails.string("x"))
        assert request.tools[0].function_declarations[0].parameters.properties == {}

    def test_response_schema_is_not_shared(self):
        schema = {"type": "OBJECT", "properties": {"a": {"type": "STRING"}}}
        builder = ContentBuilder().with_user_message("hi").with_response_schema(schema)
        first = builder.build()
        second = builder.build()

        schema["properties"]["from_caller"] = {"type": "INTEGER"}
        first.generation_config.response_schema["properties"]["from_first"] = {"type": "STRING"}

        assert second.generation_config.response_schema == {"type": "OBJECT", "properties": {"a": {"type": "STRING"}}}
        assert "from_caller" not in first.generation_config.response_schema["properties"]
        assert builder.build().generation_config.response_schema["properties"] == {"a": {"type": "STRING"}}

    def test_builder_can_build_twice(self):
        builder = ContentBuilder().with_user_message("one")
        first = builder.build()
        second = builder.with_user_message("two").build()
        assert len(first.contents) == 1
        assert len(second.contents) == 2
