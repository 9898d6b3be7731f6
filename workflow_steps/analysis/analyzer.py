"""Workflow analyzer - the single entry point of the analysis pipeline.

ingest -> order -> classify -> extract -> aggregate

analyze_workflow() is a pure function of its input document: it keeps no
state between calls, so concurrent analyses need no coordination.
"""
import json
from typing import Optional, Union

import structlog

from workflow_steps.analysis.aggregator import StepAggregator
from workflow_steps.analysis.classifier import NodeClassifier
from workflow_steps.analysis.extractors import extract_config
from workflow_steps.analysis.ingestor import IngestResult, ingest_workflow
from workflow_steps.analysis.ordering import (
    DEFAULT_MAX_ITERATION_FACTOR,
    ExecutionOrderResolver,
)
from workflow_steps.models.analysis import (
    ClassifiedStep,
    WorkflowAnalysis,
    WorkflowInfo,
)
from workflow_steps.models.workflow import WorkflowGraph

logger = structlog.get_logger()


def analyze_workflow(
    document: Union[str, bytes, dict],
    *,
    classifier: Optional[NodeClassifier] = None,
    max_iteration_factor: int = DEFAULT_MAX_ITERATION_FACTOR,
) -> WorkflowAnalysis:
    """Analyze a workflow document for step-by-step display.

    Args:
        document: JSON string or parsed n8n workflow
        classifier: Custom classification rules (defaults to AI > HTTP > Code)
        max_iteration_factor: Traversal cap as a multiple of the node count

    Returns:
        WorkflowAnalysis; structural problems yield has_error=True with
        empty collections instead of an exception
    """
    ingested = ingest_workflow(document)
    if ingested.has_error:
        return WorkflowAnalysis.failed(ingested.error or "Invalid workflow")

    graph = ingested.graph
    classifier = classifier or NodeClassifier()
    ordered = ExecutionOrderResolver(max_iteration_factor).resolve(graph)

    classified = []
    for step in ordered:
        category = classifier.classify(step)
        classified.append(
            ClassifiedStep(
                step=step,
                category=category,
                type_label=classifier.type_label(step.type),
                config=extract_config(step, category),
            )
        )

    analysis = StepAggregator().aggregate(
        classified,
        build_workflow_info(graph, ingested, document),
    )

    logger.info(
        "workflow_analyzed",
        workflow_name=analysis.workflow.name,
        total_steps=analysis.counts.total_steps,
        ai=analysis.counts.ai,
        http=analysis.counts.http,
        code=analysis.counts.code,
    )
    return analysis


def build_workflow_info(
    graph: WorkflowGraph,
    ingested: IngestResult,
    document: Union[str, bytes, dict],
) -> WorkflowInfo:
    """Header information, including a difficulty rating for the listing page."""
    node_count = len(graph.nodes) + ingested.sticky_notes_removed
    document_length = _document_length(document)

    if node_count >= 13:
        difficulty = "Advanced"
    elif node_count >= 7:
        difficulty = "Intermediate"
    elif document_length > 6000:
        difficulty = "Advanced"
    elif document_length > 4000:
        difficulty = "Intermediate"
    else:
        difficulty = "Basic"

    return WorkflowInfo(
        name=graph.name or "Unnamed Workflow",
        node_count=node_count,
        connection_count=len(graph.connections),
        tags=graph.tags,
        description=graph.description,
        difficulty=difficulty,
    )


def _document_length(document: Union[str, bytes, dict]) -> int:
    if isinstance(document, (str, bytes)):
        return len(document)
    return len(json.dumps(document, default=str))
