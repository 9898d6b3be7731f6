"""Execution order resolution for n8n workflow graphs.

Produces a best-effort topological order that tolerates the graphs people
actually publish: cycles, orphaned nodes and workflows without an explicit
trigger.

Algorithm:
1. Count incoming edges for every node, including edges from unknown sources.
2. Seed a FIFO queue with trigger nodes and with zero in-degree nodes that
   have connections recorded under their name. If there are none (fully
   cyclic graph), seed with the top-left-most node on the canvas.
3. Breadth-first traversal: visiting a node decrements the in-degree of its
   successors, and a successor is queued once its in-degree drops to zero.
4. The loop is capped at factor * node_count iterations.
5. Nodes never reached are appended in input order, flagged disconnected.

Cycles are flattened rather than reported: nodes on a cycle with no path
from a seed surface through the disconnected pass.
"""
from collections import deque

import structlog

from workflow_steps.models.analysis import WorkflowStats
from workflow_steps.models.workflow import Node, OrderedStep, WorkflowGraph

logger = structlog.get_logger()

TRIGGER_MARKER = "trigger"
DEFAULT_MAX_ITERATION_FACTOR = 3


def is_trigger_type(node_type: str) -> bool:
    """Check whether a node type denotes a workflow trigger."""
    return TRIGGER_MARKER in node_type.lower()


class ExecutionOrderResolver:
    """Orders workflow nodes for step-by-step display."""

    def __init__(self, max_iteration_factor: int = DEFAULT_MAX_ITERATION_FACTOR):
        self.max_iteration_factor = max(1, max_iteration_factor)

    def resolve(self, graph: WorkflowGraph) -> list[OrderedStep]:
        """Return every node of the graph exactly once, in execution order."""
        nodes = graph.nodes
        if not nodes:
            return []

        name_to_id = {node.name: node.id for node in nodes}
        nodes_by_id = {node.id: node for node in nodes}

        successors = self._build_successors(graph, name_to_id)

        # Every recorded edge into a known node counts, whatever its source
        in_degree = {node.id: 0 for node in nodes}
        for _, target in graph.iter_edges():
            target_id = name_to_id.get(target.node)
            if target_id is not None:
                in_degree[target_id] += 1
        starting_ids = {node_id for node_id, count in in_degree.items() if count == 0}

        seeds = self._find_seeds(graph, in_degree)

        remaining = dict(in_degree)
        queue = deque(seeds)
        queued = set(seeds)
        visited: set[str] = set()
        ordered: list[OrderedStep] = []

        max_iterations = self.max_iteration_factor * len(nodes)
        iterations = 0

        while queue and iterations < max_iterations:
            iterations += 1
            node_id = queue.popleft()
            queued.discard(node_id)
            if node_id in visited:
                continue

            ordered.append(
                _make_step(
                    nodes_by_id[node_id],
                    step_number=len(ordered) + 1,
                    is_starting_node=node_id in starting_ids,
                )
            )
            visited.add(node_id)

            for next_id in successors.get(node_id, []):
                remaining[next_id] -= 1
                if remaining[next_id] <= 0 and next_id not in visited and next_id not in queued:
                    queue.append(next_id)
                    queued.add(next_id)

        if queue:
            logger.warning(
                "max_iterations_reached",
                max_iterations=max_iterations,
                pending=len(queue),
            )

        for node in nodes:
            if node.id in visited:
                continue
            ordered.append(
                _make_step(
                    node,
                    step_number=len(ordered) + 1,
                    is_disconnected=True,
                )
            )
            logger.debug("disconnected_node", node_name=node.name, node_id=node.id)

        return ordered

    def _build_successors(
        self,
        graph: WorkflowGraph,
        name_to_id: dict[str, str],
    ) -> dict[str, list[str]]:
        """Map source node id -> target node ids, one entry per edge."""
        successors: dict[str, list[str]] = {}
        for source_name, target in graph.iter_edges():
            source_id = name_to_id.get(source_name)
            target_id = name_to_id.get(target.node)
            if source_id is None:
                logger.debug("unknown_source_node", node_name=source_name)
                continue
            if target_id is None:
                logger.warning("unknown_target_node", node_name=target.node, source=source_name)
                continue
            successors.setdefault(source_id, []).append(target_id)
        return successors

    def _find_seeds(
        self,
        graph: WorkflowGraph,
        in_degree: dict[str, int],
    ) -> list[str]:
        """Triggers, plus input-free nodes with connections under their name."""
        seeds = [
            node.id
            for node in graph.nodes
            if is_trigger_type(node.type)
            or (in_degree[node.id] == 0 and node.name in graph.connections)
        ]
        if seeds:
            return seeds

        # Fully cyclic or edgeless graph: start from the top-left node
        top_left = min(graph.nodes, key=lambda node: (node.position.x, node.position.y))
        logger.debug("fallback_seed_selected", node_name=top_left.name)
        return [top_left.id]


def _make_step(
    node: Node,
    step_number: int,
    is_starting_node: bool = False,
    is_disconnected: bool = False,
) -> OrderedStep:
    return OrderedStep(
        **node.model_dump(),
        step_number=step_number,
        is_trigger=is_trigger_type(node.type),
        is_starting_node=is_starting_node,
        is_disconnected=is_disconnected,
    )


def get_workflow_steps_in_order(
    graph: WorkflowGraph,
    max_iteration_factor: int = DEFAULT_MAX_ITERATION_FACTOR,
) -> list[OrderedStep]:
    """Return the graph's nodes in execution order."""
    return ExecutionOrderResolver(max_iteration_factor).resolve(graph)


def build_workflow_stats(steps: list[OrderedStep]) -> WorkflowStats:
    """Summarize an ordered step list."""
    total = len(steps)
    node_types: list[str] = []
    for step in steps:
        if step.type not in node_types:
            node_types.append(step.type)

    if total <= 3:
        complexity = "Simple"
    elif total <= 8:
        complexity = "Moderate"
    else:
        complexity = "Complex"

    triggers = sum(1 for step in steps if step.is_trigger)
    return WorkflowStats(
        total_steps=total,
        trigger_steps=triggers,
        action_steps=total - triggers,
        disconnected_steps=sum(1 for step in steps if step.is_disconnected),
        starting_steps=sum(1 for step in steps if step.is_starting_node),
        node_types=node_types,
        complexity=complexity,
    )


def get_workflow_stats(
    graph: WorkflowGraph,
    max_iteration_factor: int = DEFAULT_MAX_ITERATION_FACTOR,
) -> WorkflowStats:
    """Execution statistics for a workflow graph."""
    return build_workflow_stats(get_workflow_steps_in_order(graph, max_iteration_factor))


def get_workflow_step_names(graph: WorkflowGraph) -> list[str]:
    """Step names in execution order."""
    return [step.name for step in get_workflow_steps_in_order(graph)]


def get_workflow_triggers(graph: WorkflowGraph) -> list[OrderedStep]:
    """Only the trigger steps, in execution order."""
    return [step for step in get_workflow_steps_in_order(graph) if step.is_trigger]
