"""Graph ingestion - turn a raw workflow document into a WorkflowGraph.

The ingestor handles:
- Decoding JSON strings and validating the document structure
- Dropping sticky notes, which carry no execution semantics
- Normalizing each node's id, name, type, parameters and position
- Normalizing the connection map into typed edge targets

Structural problems are reported through IngestResult.has_error instead of
being raised, so callers can always render something.
"""
import json
from dataclasses import dataclass
from typing import Any, Optional, Union

import structlog
from pydantic import ValidationError

from workflow_steps.models.workflow import (
    ConnectionMap,
    ConnectionTarget,
    Node,
    Position,
    WorkflowGraph,
)

logger = structlog.get_logger()

STICKY_NOTE_MARKERS = ("stickynote", "sticky-note")


class WorkflowStructureError(ValueError):
    """The document cannot be interpreted as a workflow at all."""


@dataclass
class IngestResult:
    """Outcome of ingesting a workflow document."""

    graph: Optional[WorkflowGraph] = None
    has_error: bool = False
    error: Optional[str] = None
    sticky_notes_removed: int = 0


def is_sticky_note(node_type: str) -> bool:
    """Check whether a node type denotes a canvas annotation."""
    type_lower = node_type.lower()
    return any(marker in type_lower for marker in STICKY_NOTE_MARKERS)


def ingest_workflow(document: Union[str, bytes, dict]) -> IngestResult:
    """Validate and normalize a workflow document.

    Args:
        document: JSON string or already-parsed workflow mapping

    Returns:
        IngestResult with the graph, or has_error=True and no graph
    """
    try:
        data = _decode(document)
        graph, removed = _build_graph(data)
    except WorkflowStructureError as e:
        logger.warning("workflow_ingest_failed", error=str(e))
        return IngestResult(has_error=True, error=str(e))

    logger.debug(
        "workflow_ingested",
        node_count=len(graph.nodes),
        sticky_notes_removed=removed,
    )
    return IngestResult(graph=graph, sticky_notes_removed=removed)


def _decode(document: Union[str, bytes, dict]) -> dict:
    """Parse the document if needed and check its top-level shape."""
    if isinstance(document, (str, bytes)):
        try:
            data = json.loads(document)
        except (ValueError, RecursionError) as e:
            raise WorkflowStructureError(f"Invalid workflow JSON: {e}") from e
    else:
        data = document

    if not isinstance(data, dict):
        raise WorkflowStructureError("Workflow document must be a JSON object")
    if not isinstance(data.get("nodes"), list):
        raise WorkflowStructureError("Invalid workflow structure: missing nodes array")

    connections = data.get("connections")
    if connections is not None and not isinstance(connections, dict):
        raise WorkflowStructureError("Invalid workflow structure: connections must be an object")

    return data


def _build_graph(data: dict) -> tuple[WorkflowGraph, int]:
    """Build the graph, reporting model validation failures as structural errors."""
    try:
        return _assemble_graph(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise WorkflowStructureError(
            f"Invalid workflow structure at {location}: {first['msg']}"
        ) from e
    except RecursionError as e:
        raise WorkflowStructureError("Invalid workflow structure: nesting too deep") from e


def _assemble_graph(data: dict) -> tuple[WorkflowGraph, int]:
    nodes: list[Node] = []
    sticky_names: set[str] = set()
    sticky_count = 0
    seen_ids: set[str] = set()
    seen_names: set[str] = set()

    for index, raw in enumerate(data["nodes"]):
        if not isinstance(raw, dict):
            raise WorkflowStructureError(f"Node at index {index} is not an object")

        node = _normalize_node(raw, index)
        if is_sticky_note(node.type):
            sticky_names.add(node.name)
            sticky_count += 1
            logger.debug("sticky_note_filtered", node_name=node.name)
            continue

        if node.id in seen_ids:
            raise WorkflowStructureError(f"Duplicate node id: {node.id}")
        if node.name in seen_names:
            raise WorkflowStructureError(f"Duplicate node name: {node.name}")
        seen_ids.add(node.id)
        seen_names.add(node.name)
        nodes.append(node)

    connections = _normalize_connections(data.get("connections") or {}, sticky_names)

    description = data.get("description")

    graph = WorkflowGraph(
        nodes=nodes,
        connections=connections,
        name=data.get("name") if isinstance(data.get("name"), str) else None,
        tags=_normalize_tags(data.get("tags")),
        description=description if isinstance(description, str) else "",
    )
    return graph, sticky_count


def _normalize_tags(raw: Any) -> list[str]:
    """Tag names from plain strings or {"name": ...} objects; anything else is skipped."""
    if not isinstance(raw, list):
        return []

    tags = []
    for tag in raw:
        name = tag.get("name") if isinstance(tag, dict) else tag
        if isinstance(name, str):
            tags.append(name)
    return tags


def _normalize_node(raw: dict, index: int) -> Node:
    """Fill in defaults for a node; field-level problems never fail ingestion."""
    parameters = raw.get("parameters")
    credentials = raw.get("credentials")

    return Node(
        id=_non_empty_str(raw.get("id")) or f"step-{index}",
        name=_non_empty_str(raw.get("name")) or f"Step {index + 1}",
        type=_non_empty_str(raw.get("type")) or "unknown",
        parameters=parameters if isinstance(parameters, dict) else {},
        position=_normalize_position(raw.get("position")),
        credentials=credentials if isinstance(credentials, dict) else None,
    )


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if isinstance(value, str) and value.strip():
        return value
    return None


def _normalize_position(value: Any) -> Position:
    if isinstance(value, (list, tuple)) and len(value) >= 2:
        x, y = value[0], value[1]
        if _is_number(x) and _is_number(y):
            return Position(x=x, y=y)
    elif isinstance(value, dict):
        x, y = value.get("x"), value.get("y")
        if _is_number(x) and _is_number(y):
            return Position(x=x, y=y)
    return Position()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _normalize_connections(raw: dict, sticky_names: set[str]) -> ConnectionMap:
    """Coerce the connection map into typed targets, skipping malformed entries."""
    connections: ConnectionMap = {}

    for source_name, ports in raw.items():
        if (
            not isinstance(source_name, str)
            or source_name in sticky_names
            or not isinstance(ports, dict)
        ):
            continue

        normalized_ports: dict[str, list[list[ConnectionTarget]]] = {}
        for port_kind, outputs in ports.items():
            if not isinstance(outputs, list):
                continue

            normalized_outputs = []
            for targets in outputs:
                normalized_outputs.append(
                    _normalize_targets(targets, port_kind, sticky_names)
                )
            normalized_ports[str(port_kind)] = normalized_outputs

        connections[source_name] = normalized_ports

    return connections


def _normalize_targets(
    targets: Any,
    port_kind: str,
    sticky_names: set[str],
) -> list[ConnectionTarget]:
    if not isinstance(targets, list):
        return []

    result = []
    for target in targets:
        if not isinstance(target, dict):
            continue
        name = target.get("node")
        if not isinstance(name, str) or name in sticky_names:
            continue
        index = target.get("index")
        result.append(
            ConnectionTarget(
                node=name,
                type=target.get("type") if isinstance(target.get("type"), str) else str(port_kind),
                index=index if isinstance(index, int) and not isinstance(index, bool) else 0,
            )
        )
    return result
