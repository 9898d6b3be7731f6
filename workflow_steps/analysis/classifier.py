"""Node classification - map node types to semantic step categories.

Rules are evaluated in order and the first rule with a matching pattern
wins, so a type that mentions both a model provider and HTTP (for example
a LangChain HTTP tool) is classified as AI. Callers can pass their own
rule table to support additional node families.
"""
from dataclasses import dataclass

from workflow_steps.models.workflow import Node, StepCategory


@dataclass(frozen=True)
class CategoryRule:
    """Patterns that place a node type into a category."""

    category: StepCategory
    patterns: tuple[str, ...]

    def matches(self, node_type: str) -> bool:
        type_lower = node_type.lower()
        return any(pattern in type_lower for pattern in self.patterns)


# IMPORTANT: evaluated in order, AI before HTTP before Code
DEFAULT_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        StepCategory.AI,
        (
            "openai",
            "anthropic",
            "gemini",
            "googlepalm",
            "langchain",
            "lmchat",
            "gpt",
            "claude",
            "mistral",
            "ollama",
            "groq",
            "huggingface",
            "perplexity",
        ),
    ),
    CategoryRule(StepCategory.HTTP, ("http", "webhook", "request")),
    CategoryRule(StepCategory.CODE, ("code", "javascript", "python", "function")),
)


# Display labels for the overview list, first match wins
TYPE_LABELS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("gmail", "email"), "Email"),
    (("formtrigger", "webhook", "form"), "Webhook/Form"),
    (("drive", "storage"), "File Storage"),
    (("wait", "delay"), "Timing"),
    (("merge", "join"), "Data Processing"),
    (("calendar",), "Calendar"),
    (("notification", "alert"), "Notifications"),
    (("chat", "message"), "Messaging"),
    ((".if", "switch", "condition", "filter"), "Logic"),
)

CATEGORY_LABELS = {
    StepCategory.AI: "AI Integration",
    StepCategory.HTTP: "API Call",
    StepCategory.CODE: "Custom Code",
}


class NodeClassifier:
    """Classifies nodes using an ordered table of category rules."""

    def __init__(self, rules: tuple[CategoryRule, ...] = DEFAULT_RULES):
        self.rules = tuple(rules)

    def classify_type(self, node_type: str) -> StepCategory:
        """Return the category of a node type string."""
        for rule in self.rules:
            if rule.matches(node_type):
                return rule.category
        return StepCategory.GENERIC

    def classify(self, node: Node) -> StepCategory:
        """Return the category of a node."""
        return self.classify_type(node.type)

    def with_rule(self, rule: CategoryRule, first: bool = False) -> "NodeClassifier":
        """Return a new classifier with an extra rule appended (or prepended)."""
        rules = (rule,) + self.rules if first else self.rules + (rule,)
        return NodeClassifier(rules)

    def type_label(self, node_type: str) -> str:
        """Human display label for a node type."""
        category = self.classify_type(node_type)
        if category in CATEGORY_LABELS:
            return CATEGORY_LABELS[category]

        type_lower = node_type.lower()
        for patterns, label in TYPE_LABELS:
            if any(pattern in type_lower for pattern in patterns):
                return label
        return "Utility"
