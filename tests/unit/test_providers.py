import asyncio
import json
import unittest

import httpx

from paxhook.foundation.config import ProviderConfig, ProviderName
from paxhook.modules.llm_client import InternalRequest, ProviderError, RequestMode, is_retryable_error
from paxhook.modules.llm_client.providers import CopilotProvider, GoogleProvider, OpenRouterProvider


ADVISOR_SCHEMA = {
    "name": "advisorResponse",
    "strict": True,
    "schema": {
        "type": "object",
        "additionalProperties": False,
        "properties": {
            "message": {"type": "string"},
            "mapMode": {"type": ["object", "null"]},
        },
    },
}


def _chat_completion(content):
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "test-model",
        "choices": [{
            "index": 0,
            "message": {"role": "assistant", "content": content},
            "finish_reason": "stop",
        }],
    }


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, responder):
        self.requests = []

        def handler(request):
            self.requests.append(request)
            return responder(request)

        super().__init__(handler)


def _privileged_request():
    return InternalRequest(
        prompt_text="Advise me",
        mode=RequestMode.STRUCTURED_ACTION,
        json_schema=ADVISOR_SCHEMA,
        is_privileged_schema=True,
    )


class TestGoogleProvider(unittest.TestCase):

    def setUp(self):
        self.config = ProviderConfig(
            provider=ProviderName.GOOGLE,
            credential="g-key",
            model_identifier="gemini-test",
            structured_output_budget=2048,
        )

    def _complete(self, request, responder):
        transport = RecordingTransport(responder)

        async def run():
            async with httpx.AsyncClient(transport=transport) as http:
                return await GoogleProvider(http_client=http).complete(request, self.config)

        return asyncio.run(run()), transport.requests

    def test_chat_request_shape_and_last_text_part(self):
        body = {"candidates": [{"content": {"parts": [
            {"text": "Let me think...", "thought": True},
            {"text": "Hello"},
            {"text": ""},
        ]}}]}
        result, requests = self._complete(
            InternalRequest(prompt_text="Hi"),
            lambda r: httpx.Response(200, json=body),
        )

        self.assertEqual(result.raw_text, "Hello")
        self.assertEqual(result.provider, "google")

        sent = requests[0]
        self.assertEqual(sent.url.path, "/v1beta/models/gemini-test:generateContent")
        self.assertEqual(sent.url.params["key"], "g-key")
        payload = json.loads(sent.content)
        self.assertEqual(payload["contents"], [{"parts": [{"text": "Hi"}]}])
        gen = payload["generationConfig"]
        self.assertEqual(gen["temperature"], 0.7)
        self.assertEqual(gen["thinkingConfig"], {"include_thoughts": True, "thinking_budget": 2048})
        self.assertNotIn("responseSchema", gen)
        self.assertNotIn("responseMimeType", gen)

    def test_privileged_schema_uses_normalized_response_schema(self):
        result, requests = self._complete(
            _privileged_request(),
            lambda r: httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "{}"}]}}]}),
        )
        gen = json.loads(requests[0].content)["generationConfig"]
        self.assertEqual(gen["responseMimeType"], "application/json")
        self.assertEqual(gen["responseSchema"], {
            "type": "object",
            "properties": {
                "message": {"type": "string"},
                "mapMode": {"type": "object", "nullable": True},
            },
        })
        self.assertEqual(result.raw_text, "{}")

    def test_empty_candidates_yield_empty_text(self):
        result, _ = self._complete(InternalRequest(prompt_text="Hi"), lambda r: httpx.Response(200, json={}))
        self.assertEqual(result.raw_text, "")

    def test_error_status_is_carried(self):
        with self.assertRaises(ProviderError) as ctx:
            self._complete(InternalRequest(prompt_text="Hi"), lambda r: httpx.Response(503, text="overloaded"))
        self.assertEqual(ctx.exception.status, 503)
        self.assertIn("Google API Error: overloaded", str(ctx.exception))
        self.assertTrue(is_retryable_error(ctx.exception))

    def test_transport_failure_is_network_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        with self.assertRaises(ProviderError) as ctx:
            self._complete(InternalRequest(prompt_text="Hi"), refuse)
        self.assertIsNone(ctx.exception.status)
        self.assertTrue(str(ctx.exception).startswith("Network error"))
        self.assertTrue(is_retryable_error(ctx.exception))


class TestOpenRouterProvider(unittest.TestCase):

    def setUp(self):
        self.config = ProviderConfig(
            provider=ProviderName.OPENROUTER,
            credential="or-key",
            model_identifier="google/gemini-2.0-flash-thinking-exp:free",
            referer="https://paxhistoria.co/games/1",
            app_title="Pax Historia Hook",
        )

    def _complete(self, request, responder):
        transport = RecordingTransport(responder)

        async def run():
            async with httpx.AsyncClient(transport=transport) as http:
                return await OpenRouterProvider(http_client=http).complete(request, self.config)

        return asyncio.run(run()), transport.requests

    def test_chat_request(self):
        result, requests = self._complete(
            InternalRequest(prompt_text="Hi"),
            lambda r: httpx.Response(200, json=_chat_completion("Hello")),
        )
        self.assertEqual(result.raw_text, "Hello")

        sent = requests[0]
        self.assertEqual(str(sent.url), "https://openrouter.ai/api/v1/chat/completions")
        self.assertEqual(sent.headers["authorization"], "Bearer or-key")
        self.assertEqual(sent.headers["http-referer"], "https://paxhistoria.co/games/1")
        self.assertEqual(sent.headers["x-title"], "Pax Historia Hook")
        payload = json.loads(sent.content)
        self.assertEqual(payload["model"], "google/gemini-2.0-flash-thinking-exp:free")
        self.assertEqual(payload["messages"], [{"role": "user", "content": "Hi"}])
        self.assertNotIn("response_format", payload)

    def test_privileged_schema_is_forwarded_unmodified(self):
        _, requests = self._complete(
            _privileged_request(),
            lambda r: httpx.Response(200, json=_chat_completion("{}")),
        )
        payload = json.loads(requests[0].content)
        self.assertEqual(payload["response_format"], {"type": "json_schema", "json_schema": ADVISOR_SCHEMA})

    def test_missing_content_is_empty_text(self):
        result, _ = self._complete(
            InternalRequest(prompt_text="Hi"),
            lambda r: httpx.Response(200, json=_chat_completion(None)),
        )
        self.assertEqual(result.raw_text, "")

    def test_rate_limit_maps_to_provider_error(self):
        with self.assertRaises(ProviderError) as ctx:
            self._complete(
                InternalRequest(prompt_text="Hi"),
                lambda r: httpx.Response(429, json={"error": {"message": "rate limited"}}),
            )
        self.assertEqual(ctx.exception.status, 429)
        self.assertTrue(is_retryable_error(ctx.exception))

    def test_client_error_is_not_retryable(self):
        with self.assertRaises(ProviderError) as ctx:
            self._complete(
                InternalRequest(prompt_text="Hi"),
                lambda r: httpx.Response(401, json={"error": {"message": "bad key"}}),
            )
        self.assertEqual(ctx.exception.status, 401)
        self.assertFalse(is_retryable_error(ctx.exception))


class TestCopilotProvider(unittest.TestCase):

    def setUp(self):
        self.config = ProviderConfig(
            provider=ProviderName.COPILOT,
            model_identifier="gpt-4.1",
            base_url="http://localhost:4141/",
        )

    def _run(self, responder, call):
        transport = RecordingTransport(responder)

        async def run():
            async with httpx.AsyncClient(transport=transport) as http:
                return await call(CopilotProvider(http_client=http))

        return asyncio.run(run()), transport.requests

    def test_completion_without_credential(self):
        result, requests = self._run(
            lambda r: httpx.Response(200, json=_chat_completion("Hello")),
            lambda p: p.complete(_privileged_request(), self.config),
        )
        self.assertEqual(result.raw_text, "Hello")
        self.assertEqual(str(requests[0].url), "http://localhost:4141/v1/chat/completions")
        payload = json.loads(requests[0].content)
        self.assertEqual(payload["model"], "gpt-4.1")
        self.assertNotIn("response_format", payload)

    def test_transport_failure_is_network_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        with self.assertRaises(ProviderError) as ctx:
            self._run(refuse, lambda p: p.complete(InternalRequest(prompt_text="Hi"), self.config))
        self.assertIsNone(ctx.exception.status)
        self.assertTrue(is_retryable_error(ctx.exception))

    def test_probe_lists_unique_models_in_order(self):
        models = {"data": [{"id": "gpt-4.1"}, {"id": "claude-sonnet"}, {"id": "gpt-4.1"}, {"id": ""}]}
        result, requests = self._run(
            lambda r: httpx.Response(200, json=models),
            lambda p: p.test_connection("http://localhost:4141/"),
        )
        self.assertTrue(result.success)
        self.assertEqual(result.data, ["gpt-4.1", "claude-sonnet"])
        self.assertEqual(str(requests[0].url), "http://localhost:4141/v1/models")

    def test_probe_accepts_bare_list(self):
        self.assertEqual(CopilotProvider.parse_model_ids(["a", {"id": "b"}, "a"]), ["a", "b"])
        self.assertEqual(CopilotProvider.parse_model_ids({"unexpected": True}), [])

    def test_probe_reports_offline(self):
        result, _ = self._run(
            lambda r: httpx.Response(502, text="bad gateway"),
            lambda p: p.test_connection(),
        )
        self.assertFalse(result.success)
        self.assertEqual(result.error, "bad gateway")

        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        result, _ = self._run(refuse, lambda p: p.test_connection())
        self.assertFalse(result.success)
        self.assertIn("Network error", result.error)


if __name__ == '__main__':
    unittest.main()
