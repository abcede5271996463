"""Tests for OpenAI -> Grok request mapping."""

import pytest

from grok_proxy.conversion.request_converter import (
    convert_openai_to_grok,
    map_model,
    map_role,
)
from grok_proxy.conversion.routes import Route
from grok_proxy.core.errors import InvalidRequestError, UnsupportedRouteError


def chat_body(**overrides):
    body = {
        "model": "gpt-4",
        "messages": [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello"},
        ],
    }
    body.update(overrides)
    return body


class TestModelAndRoleMapping:
    def test_grok_model_is_forwarded(self):
        assert map_model("grok-2-mini", model_prefix="grok-", default_model="grok-1") == "grok-2-mini"

    @pytest.mark.parametrize("model", ["gpt-4", "", None, 42])
    def test_other_models_fall_back_to_default(self, model):
        assert map_model(model, model_prefix="grok-", default_model="grok-1") == "grok-1"

    @pytest.mark.parametrize(
        "role,expected",
        [("system", "system"), ("assistant", "model"), ("user", "user"), ("tool", "user"), (None, "user")],
    )
    def test_map_role(self, role, expected):
        assert map_role(role) == expected


class TestChatCompletions:
    def test_full_mapping_with_defaults(self):
        result = convert_openai_to_grok(Route.CHAT_COMPLETIONS, chat_body())

        assert result == {
            "model": "grok-1",
            "messages": [
                {"role": "system", "content": "Be brief."},
                {"role": "user", "content": "Hi"},
                {"role": "model", "content": "Hello"},
            ],
            "temperature": 1.0,
            "maxTokens": 1024,
            "topP": 1,
            "stream": False,
        }

    def test_explicit_sampling_values_are_kept(self):
        result = convert_openai_to_grok(
            Route.CHAT_COMPLETIONS,
            chat_body(model="grok-beta", temperature=0.2, max_tokens=50, top_p=0.9, stream=True),
        )
        assert result["model"] == "grok-beta"
        assert result["temperature"] == 0.2
        assert result["maxTokens"] == 50
        assert result["topP"] == 0.9
        assert result["stream"] is True

    def test_zero_temperature_is_not_replaced(self):
        result = convert_openai_to_grok(Route.CHAT_COMPLETIONS, chat_body(temperature=0))
        assert result["temperature"] == 0

    def test_scalar_stop_is_wrapped(self):
        result = convert_openai_to_grok(Route.CHAT_COMPLETIONS, chat_body(stop="foo"))
        assert result["stopSequences"] == ["foo"]

    def test_stop_list_is_kept(self):
        result = convert_openai_to_grok(Route.CHAT_COMPLETIONS, chat_body(stop=["a", "b"]))
        assert result["stopSequences"] == ["a", "b"]

    @pytest.mark.parametrize("stop", [None, "", []])
    def test_empty_stop_is_omitted(self, stop):
        result = convert_openai_to_grok(Route.CHAT_COMPLETIONS, chat_body(stop=stop))
        assert "stopSequences" not in result

    def test_missing_content_becomes_empty_string(self):
        result = convert_openai_to_grok(
            Route.CHAT_COMPLETIONS, chat_body(messages=[{"role": "user", "content": None}])
        )
        assert result["messages"] == [{"role": "user", "content": ""}]

    def test_message_count_and_order_preserved(self):
        messages = [{"role": "user", "content": str(i)} for i in range(5)]
        result = convert_openai_to_grok(Route.CHAT_COMPLETIONS, chat_body(messages=messages))
        assert [m["content"] for m in result["messages"]] == ["0", "1", "2", "3", "4"]

    @pytest.mark.parametrize("messages", [None, "hello", {"role": "user"}])
    def test_messages_must_be_a_list(self, messages):
        with pytest.raises(InvalidRequestError):
            convert_openai_to_grok(Route.CHAT_COMPLETIONS, chat_body(messages=messages))

    def test_message_entries_must_be_objects(self):
        with pytest.raises(InvalidRequestError):
            convert_openai_to_grok(Route.CHAT_COMPLETIONS, chat_body(messages=["hi"]))

    def test_mapping_is_deterministic(self):
        body = chat_body(stop="x", temperature=0.5)
        assert convert_openai_to_grok(Route.CHAT_COMPLETIONS, body) == convert_openai_to_grok(
            Route.CHAT_COMPLETIONS, body
        )

    def test_custom_prefix_and_default(self):
        result = convert_openai_to_grok(
            Route.CHAT_COMPLETIONS,
            chat_body(model="x-large"),
            model_prefix="x-",
            default_model="x-small",
        )
        assert result["model"] == "x-large"


class TestCompletionsAndEmbeddings:
    def test_completions_mapping(self):
        result = convert_openai_to_grok(
            Route.COMPLETIONS, {"model": "text-davinci", "prompt": "Once", "stop": "\n"}
        )
        assert result == {
            "model": "grok-1",
            "prompt": "Once",
            "temperature": 1.0,
            "maxTokens": 1024,
            "topP": 1,
            "stream": False,
            "stopSequences": ["\n"],
        }

    def test_embeddings_scalar_input_is_wrapped(self):
        result = convert_openai_to_grok(Route.EMBEDDINGS, {"model": "grok-embed", "input": "hello"})
        assert result == {"model": "grok-embed", "input": ["hello"]}

    def test_embeddings_list_input_is_kept(self):
        result = convert_openai_to_grok(Route.EMBEDDINGS, {"input": ["a", "b"]})
        assert result == {"model": "grok-1", "input": ["a", "b"]}


@pytest.mark.parametrize("route", [Route.MODELS, Route.UNSUPPORTED])
def test_routes_without_upstream_are_rejected(route):
    with pytest.raises(UnsupportedRouteError):
        convert_openai_to_grok(route, {})
