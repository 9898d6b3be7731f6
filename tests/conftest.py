"""Shared workflow documents for the test suite."""
import pytest


def make_node(name, node_type, parameters=None, position=(0, 0), node_id=None):
    """Build a raw n8n node dict."""
    return {
        "id": node_id or f"id-{name.lower().replace(' ', '-')}",
        "name": name,
        "type": node_type,
        "typeVersion": 1,
        "position": list(position),
        "parameters": parameters or {},
    }


def link(*pairs):
    """Build an n8n connection map from (source, target) name pairs."""
    connections = {}
    for source, target in pairs:
        outputs = connections.setdefault(source, {"main": [[]]})["main"]
        outputs[0].append({"node": target, "type": "main", "index": 0})
    return connections


@pytest.fixture
def sample_workflow():
    """A realistic lead-enrichment workflow with every step category."""
    nodes = [
        make_node(
            "Start",
            "n8n-nodes-base.manualTrigger",
            position=(0, 300),
        ),
        make_node(
            "Fetch Leads",
            "n8n-nodes-base.httpRequest",
            {
                "method": "POST",
                "url": "https://api.example.com/v1/leads",
                "sendBody": True,
                "specifyBody": "json",
                "jsonBody": '{"limit": 10}',
                "headerParameters": {
                    "parameters": [{"name": "Authorization", "value": "Bearer token"}]
                },
            },
            position=(200, 300),
        ),
        make_node(
            "Score Leads",
            "n8n-nodes-base.code",
            {"jsCode": "// Score each lead\nconst scored = items.map(i => i);\nreturn scored;"},
            position=(400, 300),
        ),
        make_node(
            "Write Email",
            "@n8n/n8n-nodes-langchain.agent",
            {
                "text": "Write a short intro email",
                "options": {"systemMessage": "You are a sales assistant"},
            },
            position=(600, 300),
        ),
        make_node(
            "Chat Model",
            "@n8n/n8n-nodes-langchain.lmChatOpenAi",
            {"model": {"__rl": True, "value": "gpt-4o-mini", "mode": "list"}},
            position=(600, 500),
        ),
        make_node(
            "Format Output",
            "n8n-nodes-base.set",
            position=(800, 300),
        ),
        make_node(
            "Note",
            "n8n-nodes-base.stickyNote",
            {"content": "Remember to set credentials"},
            position=(-200, -200),
        ),
    ]
    connections = link(
        ("Start", "Fetch Leads"),
        ("Fetch Leads", "Score Leads"),
        ("Score Leads", "Write Email"),
        ("Write Email", "Format Output"),
    )
    connections["Chat Model"] = {
        "ai_languageModel": [[{"node": "Write Email", "type": "ai_languageModel", "index": 0}]]
    }
    return {
        "name": "Lead Enrichment",
        "nodes": nodes,
        "connections": connections,
        "tags": [{"name": "sales"}, "ai"],
    }
