"""Category-specific configuration extraction.

Turns a node's free-form parameters into copyable, display-ready records:
- AI nodes: provider, model, system message and prompt
- HTTP nodes: method, URL, headers, body and an equivalent cURL command
- Code nodes: source, language, declared names and a complexity tier

Every helper is total. Missing or mistyped parameters fall back to a
default or None so one odd node never aborts the whole analysis.
"""
import json
import re
from typing import Any, Callable, Optional
from urllib.parse import urlparse

from workflow_steps.analysis.accessors import (
    find_in,
    first_list,
    first_present,
    first_text,
    path,
)
from workflow_steps.models.analysis import (
    AIConfig,
    CodeConfig,
    HttpConfig,
    HttpHeader,
)
from workflow_steps.models.workflow import OrderedStep, StepCategory

# =============================================================================
# AI
# =============================================================================

# type substring -> provider label, first match wins
AI_PROVIDERS: tuple[tuple[str, str], ...] = (
    ("openai", "OpenAI"),
    ("anthropic", "Anthropic"),
    ("claude", "Anthropic"),
    ("gemini", "Google AI"),
    ("google", "Google AI"),
    ("mistral", "Mistral AI"),
    ("ollama", "Ollama"),
    ("groq", "Groq"),
    ("langchain", "LangChain"),
)
DEFAULT_AI_PROVIDER = "AI Service"

MODEL_ACCESSORS = (
    path("model", "value"),
    path("modelId", "value"),
    path("model"),
    path("modelId"),
    path("modelName"),
    path("options", "model"),
)

SYSTEM_MESSAGE_ACCESSORS = (
    path("options", "systemMessage"),
    path("systemMessage"),
    path("options", "systemMessage", "value"),
    find_in(("messages", "values"), {"role": "system"}, "content"),
)

PROMPT_ACCESSORS = (
    path("text"),
    path("prompt"),
    path("text", "value"),
    path("messages", "values", 0, "content"),
    path("messages", "messageValues", 0, "message"),
    path("messages", 0, "content"),
)


def get_ai_provider(node_type: str) -> str:
    """Provider display label inferred from the node type."""
    type_lower = node_type.lower()
    for marker, label in AI_PROVIDERS:
        if marker in type_lower:
            return label
    return DEFAULT_AI_PROVIDER


def get_ai_category(node_type: str) -> str:
    type_lower = node_type.lower()
    if "lmchat" in type_lower:
        return "Chat AI Model"
    if "agent" in type_lower:
        return "AI Agent"
    if type_lower.endswith(".openai"):
        return "AI Text Generation"
    return "AI Model"


def extract_ai_config(step: OrderedStep) -> AIConfig:
    params = step.parameters
    ai_category = get_ai_category(step.type)
    options = params.get("options")

    return AIConfig(
        node_id=step.id,
        name=step.name,
        type=step.type,
        step_number=step.step_number,
        title=f"{step.name} ({ai_category})",
        provider=get_ai_provider(step.type),
        ai_category=ai_category,
        model=first_text(params, MODEL_ACCESSORS),
        system_message=first_text(params, SYSTEM_MESSAGE_ACCESSORS),
        prompt=first_text(params, PROMPT_ACCESSORS),
        options=options if isinstance(options, dict) else {},
    )


# =============================================================================
# HTTP
# =============================================================================

URL_PLACEHOLDER = "No URL specified"
BODY_METHODS = ("POST", "PUT", "PATCH")

METHOD_ACCESSORS = (path("method"), path("requestMethod"), path("httpMethod"))
URL_ACCESSORS = (path("url"),)
HEADER_ACCESSORS = (
    path("headerParameters", "parameters"),
    path("headers", "parameters"),
    path("headers"),
)
BODY_ACCESSORS = (path("jsonBody"), path("body"))
BODY_PARAMETER_ACCESSORS = (path("bodyParameters", "parameters"),)


def normalize_headers(raw: Any) -> list[HttpHeader]:
    """Headers from a list of {name, value} pairs or a flat mapping."""
    if isinstance(raw, dict) and not isinstance(raw.get("parameters"), list):
        pairs = list(raw.items())
    elif isinstance(raw, list):
        pairs = [
            (item.get("name"), item.get("value"))
            for item in raw
            if isinstance(item, dict)
        ]
    else:
        return []

    headers = []
    for name, value in pairs:
        if not isinstance(name, str) or not name.strip():
            continue
        if value is None or value == "":
            continue
        headers.append(HttpHeader(name=name, value=str(value)))
    return headers


def normalize_body(params: dict) -> tuple[Optional[str], Optional[Any]]:
    """Resolve the request body.

    Returns:
        (formatted body text, parsed JSON value or None)
    """
    raw = first_present(params, BODY_ACCESSORS)
    if raw is not None:
        return _format_body(raw)

    body_parameters = first_list(params, BODY_PARAMETER_ACCESSORS)
    if body_parameters is not None:
        return json.dumps(body_parameters, indent=2, ensure_ascii=False), None

    return None, None


def _format_body(raw: Any) -> tuple[Optional[str], Optional[Any]]:
    if isinstance(raw, (dict, list)):
        return json.dumps(raw, indent=2, ensure_ascii=False), raw
    if not isinstance(raw, str):
        return str(raw), None

    try:
        parsed = json.loads(raw)
    except ValueError:
        # n8n expressions and other free text are kept verbatim
        return raw, None
    return json.dumps(parsed, indent=2, ensure_ascii=False), parsed


def detect_body_type(params: dict) -> str:
    body_parameters = params.get("bodyParameters")
    has_json = bool(params.get("jsonBody"))
    has_form = isinstance(body_parameters, dict) and bool(body_parameters.get("parameters"))

    if not params.get("sendBody") and not (has_json or has_form or params.get("body")):
        return "none"
    if has_json or params.get("specifyBody") == "json":
        return "json"
    if has_form:
        return "form"

    content_type = params.get("contentType")
    if content_type == "multipart-form-data":
        return "multipart"
    if content_type in ("form-urlencoded", "application/x-www-form-urlencoded"):
        return "urlencoded"
    return "other"


def get_url_domain(url: str) -> str:
    """Host of a URL for display, falling back to the raw value."""
    if not url or url == URL_PLACEHOLDER:
        return "Unknown"
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None
    if hostname:
        return hostname

    parts = url.split("/")
    return parts[2] if len(parts) > 2 and parts[2] else url


def build_curl_command(
    method: str,
    url: str,
    headers: list[HttpHeader],
    body: Optional[str],
) -> str:
    """Command-line equivalent of a request; identical inputs give identical output."""
    method = method.upper()
    curl = f'curl -X {method} "{url}"'

    for header in headers:
        if header.name and header.value:
            curl += f' \\\n  -H "{header.name}: {header.value}"'

    if body and method in BODY_METHODS:
        curl += f" \\\n  -d '{body}'"

    return curl


def extract_http_config(step: OrderedStep) -> HttpConfig:
    params = step.parameters

    method = (first_text(params, METHOD_ACCESSORS) or "GET").strip().upper()
    url = first_text(params, URL_ACCESSORS) or URL_PLACEHOLDER
    headers = normalize_headers(first_present(params, HEADER_ACCESSORS))
    body, parsed_body = normalize_body(params)
    domain = get_url_domain(url)
    authentication = params.get("authentication")

    return HttpConfig(
        node_id=step.id,
        name=step.name,
        type=step.type,
        step_number=step.step_number,
        title=f"{step.name} (HTTP Request)",
        method=method,
        url=url,
        headers=headers,
        body=body,
        body_type=detect_body_type(params),
        parsed_json_body=parsed_body,
        authentication=authentication if isinstance(authentication, str) else None,
        domain=domain,
        description=f"{method} request to {domain}",
        curl_command=build_curl_command(method, url, headers, body),
    )


# =============================================================================
# CODE
# =============================================================================

# parameter key -> language, checked in order
CODE_SOURCE_KEYS: tuple[tuple[str, str], ...] = (
    ("jsCode", "javascript"),
    ("functionCode", "javascript"),
    ("functionItemCode", "javascript"),
    ("code", "javascript"),
    ("pythonCode", "python"),
)
DEFAULT_LANGUAGE = "javascript"

DECLARATION_PATTERN = re.compile(
    r"\bfunction\b\s*\*?\s*([A-Za-z_$][\w$]*)\s*\("
    r"|\b(?:const|let|var)\s+([A-Za-z_$][\w$]*)\s*=(?!=)"
    r"|\bdef\s+([A-Za-z_]\w*)\s*\("
)

ASYNC_PATTERN = re.compile(r"\basync\b|\bawait\b|\bPromise\b|\.then\(")
LOOP_PATTERN = re.compile(r"\bfor\b|\bwhile\b|\.forEach\(|\.map\(|\.reduce\(")
CONDITIONAL_PATTERN = re.compile(r"\bif\b|\bswitch\b|\belif\b")
REGEX_PATTERN = re.compile(r"\bRegExp\b|\bre\.\w+\(|\.match\(|\.test\(|\.replace\(\s*/")

CODE_OPERATIONS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("json.parse", "json.stringify", "json.loads", "json.dumps"), "JSON Processing"),
    (("items.find", "filter"), "Data Filtering"),
    (("return",), "Data Return"),
    (("console.log", "print("), "Debug Logging"),
    (("binary",), "Binary Data"),
)
MAX_OPERATIONS = 4


def resolve_code_source(params: dict) -> tuple[str, str]:
    """Return (source, language) from whichever source key is populated."""
    keys = CODE_SOURCE_KEYS
    if params.get("language") in ("python", "pythonNative"):
        # Python mode: prefer the python key, and treat a generic `code` key as python
        keys = (("pythonCode", "python"), ("code", "python")) + keys

    for key, language in keys:
        source = params.get(key)
        if isinstance(source, str) and source.strip():
            return source, language
    return "", DEFAULT_LANGUAGE


def extract_function_names(source: str) -> list[str]:
    """Names declared with `function x`, `const/let/var x =` or `def x(`."""
    names: list[str] = []
    for match in DECLARATION_PATTERN.finditer(source):
        name = next(group for group in match.groups() if group)
        if name not in names:
            names.append(name)
    return names


def score_code_complexity(source: str, function_count: int) -> int:
    line_count = len(source.splitlines())
    score = 0

    if line_count > 50:
        score += 2
    elif line_count > 20:
        score += 1

    if function_count > 3:
        score += 2
    elif function_count >= 1:
        score += 1

    for pattern in (ASYNC_PATTERN, LOOP_PATTERN, CONDITIONAL_PATTERN, REGEX_PATTERN):
        if pattern.search(source):
            score += 1

    return score


def complexity_tier(score: int) -> str:
    if score <= 2:
        return "Simple"
    if score <= 5:
        return "Moderate"
    return "Complex"


def describe_code(source: str, language: str) -> str:
    """Summary built from the source's comment lines."""
    if not source:
        return "No description available"

    markers = ("#",) if language == "python" else ("//",)
    comments = []
    for line in source.splitlines():
        stripped = line.strip()
        for marker in markers:
            if stripped.startswith(marker):
                text = stripped.lstrip(marker).strip()
                if text:
                    comments.append(text)
                break

    if comments:
        return " ".join(comments)
    return "Custom Python logic" if language == "python" else "Custom JavaScript logic"


def detect_code_operations(source: str) -> list[str]:
    source_lower = source.lower()
    operations = [
        label
        for markers, label in CODE_OPERATIONS
        if any(marker in source_lower for marker in markers)
    ]
    return operations[:MAX_OPERATIONS] or ["Custom Logic"]


def extract_code_config(step: OrderedStep) -> CodeConfig:
    source, language = resolve_code_source(step.parameters)
    function_names = extract_function_names(source)
    score = score_code_complexity(source, len(function_names))

    return CodeConfig(
        node_id=step.id,
        name=step.name,
        type=step.type,
        step_number=step.step_number,
        title=f"{step.name} (Code Logic)",
        language=language,
        source=source,
        function_names=function_names,
        complexity=complexity_tier(score),
        line_count=len(source.splitlines()),
        description=describe_code(source, language),
        operations=detect_code_operations(source) if source else [],
    )


# =============================================================================
# DISPATCH
# =============================================================================

EXTRACTORS: dict[StepCategory, Optional[Callable[[OrderedStep], Any]]] = {
    StepCategory.AI: extract_ai_config,
    StepCategory.HTTP: extract_http_config,
    StepCategory.CODE: extract_code_config,
    StepCategory.GENERIC: None,
}


def extract_config(step: OrderedStep, category: StepCategory):
    """Extract the category-specific config, or None for generic steps."""
    extractor = EXTRACTORS[category]
    if extractor is None:
        return None
    return extractor(step)
