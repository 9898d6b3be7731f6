"""Tests for category-specific configuration extraction."""
import json

import pytest

from workflow_steps.analysis.accessors import find_in, first_text, path
from workflow_steps.analysis.extractors import (
    URL_PLACEHOLDER,
    build_curl_command,
    complexity_tier,
    describe_code,
    detect_body_type,
    extract_ai_config,
    extract_code_config,
    extract_config,
    extract_function_names,
    extract_http_config,
    get_ai_provider,
    get_url_domain,
)
from workflow_steps.models.analysis import HttpHeader
from workflow_steps.models.workflow import OrderedStep, StepCategory


def _step(node_type, parameters=None, name="Node"):
    return OrderedStep(
        id="node-1",
        name=name,
        type=node_type,
        parameters=parameters or {},
        step_number=1,
    )


class TestAccessors:
    """Ordered parameter lookups."""

    def test_path_follows_keys_and_indexes(self):
        params = {"messages": {"values": [{"content": "hi"}]}}

        assert path("messages", "values", 0, "content")(params) == "hi"
        assert path("messages", "values", 3, "content")(params) is None
        assert path("messages", "missing")(params) is None
        assert path("messages", 0)(params) is None

    def test_first_text_skips_blank_and_non_strings(self):
        params = {"a": "  ", "b": 42, "c": "value"}

        assert first_text(params, [path("a"), path("b"), path("c")]) == "value"
        assert first_text(params, [path("a"), path("b")]) is None

    def test_find_in_matches_item_fields(self):
        params = {"items": [{"role": "user", "content": "u"}, {"role": "system", "content": "s"}]}

        assert find_in(("items",), {"role": "system"}, "content")(params) == "s"
        assert find_in(("items",), {"role": "tool"}, "content")(params) is None
        assert find_in(("nope",), {"role": "system"}, "content")(params) is None


class TestAIExtraction:
    """AI node configuration."""

    def test_chat_model_resource_locator(self):
        config = extract_ai_config(
            _step(
                "@n8n/n8n-nodes-langchain.lmChatOpenAi",
                {"model": {"__rl": True, "value": "gpt-4o-mini", "mode": "list"}},
                name="Chat Model",
            )
        )

        assert config.category == StepCategory.AI
        assert config.provider == "OpenAI"
        assert config.ai_category == "Chat AI Model"
        assert config.model == "gpt-4o-mini"
        assert config.title == "Chat Model (Chat AI Model)"

    def test_agent_prompt_and_system_message(self):
        config = extract_ai_config(
            _step(
                "@n8n/n8n-nodes-langchain.agent",
                {
                    "promptType": "define",
                    "text": "={{ $json.chatInput }}",
                    "options": {"systemMessage": "You are helpful"},
                },
            )
        )

        assert config.provider == "LangChain"
        assert config.ai_category == "AI Agent"
        assert config.prompt == "={{ $json.chatInput }}"
        assert config.system_message == "You are helpful"
        assert config.options == {"systemMessage": "You are helpful"}

    def test_openai_messages_array(self):
        config = extract_ai_config(
            _step(
                "@n8n/n8n-nodes-langchain.openAi",
                {
                    "modelId": {"value": "gpt-4"},
                    "messages": {
                        "values": [
                            {"content": "Summarize this article"},
                            {"role": "system", "content": "Be brief"},
                        ]
                    },
                },
            )
        )

        assert config.ai_category == "AI Text Generation"
        assert config.model == "gpt-4"
        assert config.prompt == "Summarize this article"
        assert config.system_message == "Be brief"

    def test_missing_fields_are_none(self):
        config = extract_ai_config(_step("n8n-nodes-base.anthropic", {"model": 7, "options": "x"}))

        assert config.provider == "Anthropic"
        assert config.model is None
        assert config.prompt is None
        assert config.system_message is None
        assert config.options == {}

    @pytest.mark.parametrize(
        "node_type,provider",
        [
            ("@n8n/n8n-nodes-langchain.lmChatAnthropic", "Anthropic"),
            ("@n8n/n8n-nodes-langchain.lmChatGoogleGemini", "Google AI"),
            ("@n8n/n8n-nodes-langchain.lmChatMistralCloud", "Mistral AI"),
            ("@n8n/n8n-nodes-langchain.lmOllama", "Ollama"),
            ("@n8n/n8n-nodes-langchain.chainLlm", "LangChain"),
            ("custom.gptNode", "AI Service"),
        ],
    )
    def test_provider_table(self, node_type, provider):
        assert get_ai_provider(node_type) == provider


class TestHttpExtraction:
    """HTTP request configuration and cURL synthesis."""

    def test_missing_method_defaults_to_get_without_body_flag(self):
        config = extract_http_config(
            _step(
                "n8n-nodes-base.httpRequest",
                {"url": "https://api.example.com/items", "jsonBody": '{"a": 1}'},
            )
        )

        assert config.method == "GET"
        assert "-d" not in config.curl_command
        assert config.curl_command == 'curl -X GET "https://api.example.com/items"'
        assert config.description == "GET request to api.example.com"

    def test_post_with_headers_and_json_body(self):
        config = extract_http_config(
            _step(
                "n8n-nodes-base.httpRequest",
                {
                    "method": "POST",
                    "url": "https://api.example.com/v1/leads",
                    "sendBody": True,
                    "specifyBody": "json",
                    "jsonBody": '{"name": "Ada"}',
                    "headerParameters": {
                        "parameters": [
                            {"name": "Authorization", "value": "Bearer token"},
                            {"name": "Content-Type", "value": "application/json"},
                        ]
                    },
                },
                name="Create Lead",
            )
        )

        assert config.title == "Create Lead (HTTP Request)"
        assert config.body_type == "json"
        assert config.parsed_json_body == {"name": "Ada"}
        assert [h.name for h in config.headers] == ["Authorization", "Content-Type"]
        assert config.curl_command == (
            'curl -X POST "https://api.example.com/v1/leads" \\\n'
            '  -H "Authorization: Bearer token" \\\n'
            '  -H "Content-Type: application/json" \\\n'
            "  -d '{\n  \"name\": \"Ada\"\n}'"
        )

    def test_curl_is_deterministic(self):
        headers = [HttpHeader(name="X-Key", value="abc")]

        first = build_curl_command("put", "https://x.io", headers, '{"a": 1}')
        second = build_curl_command("put", "https://x.io", headers, '{"a": 1}')

        assert first == second
        assert first.endswith("-d '{\"a\": 1}'")
        assert first.startswith('curl -X PUT "https://x.io"')

    def test_json_body_round_trips(self):
        original = '{"items": [1, 2, {"x": null}], "ok": true, "name": "café"}'

        config = extract_http_config(
            _step("n8n-nodes-base.httpRequest", {"method": "POST", "jsonBody": original})
        )

        assert json.loads(config.body) == json.loads(original)
        assert config.body.startswith("{\n  ")

    def test_expression_body_kept_verbatim(self):
        config = extract_http_config(
            _step(
                "n8n-nodes-base.httpRequest",
                {"method": "POST", "url": "https://x.io", "jsonBody": "={{ $json.payload }}"},
            )
        )

        assert config.body == "={{ $json.payload }}"
        assert config.parsed_json_body is None
        assert "-d '={{ $json.payload }}'" in config.curl_command

    def test_body_parameters_are_serialized(self):
        parameters = [{"name": "email", "value": "a@b.c"}]

        config = extract_http_config(
            _step(
                "n8n-nodes-base.httpRequest",
                {
                    "method": "PATCH",
                    "sendBody": True,
                    "bodyParameters": {"parameters": parameters},
                },
            )
        )

        assert json.loads(config.body) == parameters
        assert config.body_type == "form"

    def test_generic_body_field_used_after_json_body(self):
        config = extract_http_config(
            _step("n8n-nodes-base.httpRequest", {"jsonBody": "", "body": {"k": "v"}})
        )

        assert json.loads(config.body) == {"k": "v"}

    def test_flat_header_mapping_and_nested_headers(self):
        flat = extract_http_config(
            _step("n8n-nodes-base.httpRequest", {"headers": {"X-Api-Key": "abc", "Empty": ""}})
        )
        nested = extract_http_config(
            _step(
                "n8n-nodes-base.httpRequest",
                {"headers": {"parameters": [{"name": "Accept", "value": "text/plain"}, {"name": ""}]}},
            )
        )

        assert flat.headers == [HttpHeader(name="X-Api-Key", value="abc")]
        assert nested.headers == [HttpHeader(name="Accept", value="text/plain")]

    def test_missing_url_and_method_case(self):
        config = extract_http_config(_step("n8n-nodes-base.httpRequest", {"method": "post"}))

        assert config.method == "POST"
        assert config.url == URL_PLACEHOLDER
        assert config.domain == "Unknown"
        assert config.body is None
        assert config.body_type == "none"

    def test_webhook_method_from_http_method(self):
        config = extract_http_config(
            _step("n8n-nodes-base.webhook", {"httpMethod": "POST", "path": "incoming"})
        )

        assert config.method == "POST"
        assert config.url == URL_PLACEHOLDER

    @pytest.mark.parametrize(
        "params,expected",
        [
            ({}, "none"),
            ({"sendBody": True, "contentType": "multipart-form-data"}, "multipart"),
            ({"sendBody": True, "contentType": "form-urlencoded"}, "urlencoded"),
            ({"sendBody": True, "contentType": "raw"}, "other"),
        ],
    )
    def test_body_type(self, params, expected):
        assert detect_body_type(params) == expected

    @pytest.mark.parametrize(
        "url,domain",
        [
            ("https://api.openai.com/v1/chat", "api.openai.com"),
            ("={{ $json.url }}", "={{ $json.url }}"),
            ("", "Unknown"),
        ],
    )
    def test_url_domain(self, url, domain):
        assert get_url_domain(url) == domain


class TestCodeExtraction:
    """Code node configuration."""

    def test_python_source_without_js_key(self):
        source = "def handler(items):\n    return items\n"

        config = extract_code_config(
            _step("n8n-nodes-base.code", {"language": "python", "pythonCode": source})
        )

        assert config.language == "python"
        assert config.source == source
        assert config.function_names == ["handler"]
        assert config.title == "Node (Code Logic)"

    def test_python_key_alone_implies_python(self):
        config = extract_code_config(
            _step("n8n-nodes-base.code", {"pythonCode": "# Clean rows\nasync def clean(rows):\n    pass"})
        )

        assert config.language == "python"
        assert config.function_names == ["clean"]
        assert config.description == "Clean rows"

    def test_js_declarations_in_order(self):
        source = (
            "const total = items.length;\n"
            "function format(x) {\n  return x;\n}\n"
            "let y = 2;\n"
            "var total = 3;"
        )

        assert extract_function_names(source) == ["total", "format", "y"]

    def test_legacy_function_node(self):
        config = extract_code_config(
            _step("n8n-nodes-base.function", {"functionCode": "return items;"})
        )

        assert config.language == "javascript"
        assert config.source == "return items;"
        assert config.complexity == "Simple"
        assert config.operations == ["Data Return"]
        assert config.description == "Custom JavaScript logic"

    def test_moderate_complexity(self):
        source = "function f(items) {\n  for (const i of items) {\n    if (i.ok) { }\n  }\n}"

        assert extract_code_config(_step("n8n-nodes-base.code", {"jsCode": source})).complexity == "Moderate"

    def test_complex_code(self):
        body = "\n".join(f"// line {i}" for i in range(60))
        source = (
            body
            + "\nasync function a() { await fetch(u); }"
            + "\nfunction b() {}\nfunction c() {}\nfunction d() {}"
            + "\nfor (const x of xs) { if (/a+/.test(x)) {} }"
        )

        config = extract_code_config(_step("n8n-nodes-base.code", {"jsCode": source}))

        assert config.complexity == "Complex"
        assert config.function_names == ["a", "b", "c", "d"]
        assert config.line_count == 65

    @pytest.mark.parametrize(
        "score,tier",
        [(0, "Simple"), (2, "Simple"), (3, "Moderate"), (5, "Moderate"), (6, "Complex")],
    )
    def test_complexity_thresholds(self, score, tier):
        assert complexity_tier(score) == tier

    def test_empty_code_node(self):
        config = extract_code_config(_step("n8n-nodes-base.code", {"jsCode": 12}))

        assert config.source == ""
        assert config.language == "javascript"
        assert config.function_names == []
        assert config.complexity == "Simple"
        assert config.description == "No description available"
        assert config.operations == []

    def test_operations_capped_at_four(self):
        source = "JSON.parse(x); items.filter(f); console.log(x); $binary; return x;"

        config = extract_code_config(_step("n8n-nodes-base.code", {"jsCode": source}))

        assert config.operations == ["JSON Processing", "Data Filtering", "Data Return", "Debug Logging"]

    def test_describe_code_joins_comments(self):
        assert describe_code("// Parse\n// the input\nreturn x;", "javascript") == "Parse the input"


class TestDispatch:
    """extract_config routes by category."""

    def test_generic_has_no_config(self):
        assert extract_config(_step("n8n-nodes-base.set"), StepCategory.GENERIC) is None

    def test_every_category_is_handled(self):
        step = _step("anything")
        for category in StepCategory:
            extract_config(step, category)
