"""Workflow graph analysis: ingestion, ordering, classification, extraction."""
from workflow_steps.analysis.analyzer import analyze_workflow
from workflow_steps.analysis.classifier import CategoryRule, NodeClassifier
from workflow_steps.analysis.ingestor import IngestResult, ingest_workflow
from workflow_steps.analysis.ordering import (
    ExecutionOrderResolver,
    get_workflow_stats,
    get_workflow_step_names,
    get_workflow_steps_in_order,
    get_workflow_triggers,
)

__all__ = [
    "analyze_workflow",
    "CategoryRule",
    "NodeClassifier",
    "IngestResult",
    "ingest_workflow",
    "ExecutionOrderResolver",
    "get_workflow_stats",
    "get_workflow_step_names",
    "get_workflow_steps_in_order",
    "get_workflow_triggers",
]
