"""Typed view of an n8n workflow document.

These models sit between the raw JSON stored by the marketplace and the
analysis pipeline. They provide:
- Normalized node records (id, name, type, parameters, position)
- The connection map keyed by source node name
- Ordered steps decorated with traversal metadata
"""
from enum import Enum
from typing import Any, Iterator, Optional

from pydantic import BaseModel, Field


class StepCategory(str, Enum):
    """Semantic category of a workflow node."""
    AI = "ai"
    HTTP = "http"
    CODE = "code"
    GENERIC = "generic"


class Position(BaseModel):
    """2D canvas position of a node."""

    x: float = Field(0, description="X coordinate")
    y: float = Field(0, description="Y coordinate")


class Node(BaseModel):
    """A single node of an n8n workflow."""

    id: str = Field(..., description="Unique node identifier")
    name: str = Field(..., description="Unique node name, used as edge key")
    type: str = Field(..., description="Namespaced n8n node type")
    parameters: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form node parameters",
    )
    position: Position = Field(
        default_factory=Position,
        description="Canvas position",
    )
    credentials: Optional[dict[str, Any]] = Field(
        None,
        description="Credential references, if any",
    )


class ConnectionTarget(BaseModel):
    """Target descriptor of a directed edge."""

    node: str = Field(..., description="Target node name")
    type: str = Field("main", description="Port kind")
    index: int = Field(0, description="Target input index")


# source name -> port kind -> output index -> targets
ConnectionMap = dict[str, dict[str, list[list[ConnectionTarget]]]]


class WorkflowGraph(BaseModel):
    """Ingested workflow: annotation-free nodes plus their connections."""

    nodes: list[Node] = Field(default_factory=list)
    connections: ConnectionMap = Field(default_factory=dict)
    name: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    description: str = ""

    def iter_targets(self, source_name: str) -> Iterator[ConnectionTarget]:
        """Yield every edge target recorded under a source node name."""
        for outputs in self.connections.get(source_name, {}).values():
            for targets in outputs:
                yield from targets

    def iter_edges(self) -> Iterator[tuple[str, ConnectionTarget]]:
        """Yield (source name, target) for every edge in the graph."""
        for source_name in self.connections:
            for target in self.iter_targets(source_name):
                yield source_name, target


class OrderedStep(Node):
    """A node placed in execution order."""

    step_number: int = Field(..., ge=1, description="1-based position")
    is_trigger: bool = False
    is_starting_node: bool = False
    is_disconnected: bool = False
