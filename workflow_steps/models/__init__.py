"""Pydantic models for the workflow steps analyzer."""
from workflow_steps.models.workflow import (
    StepCategory,
    Position,
    Node,
    ConnectionTarget,
    ConnectionMap,
    WorkflowGraph,
    OrderedStep,
)
from workflow_steps.models.analysis import (
    StepConfig,
    AIConfig,
    HttpHeader,
    HttpConfig,
    CodeConfig,
    ExtractedConfig,
    ClassifiedStep,
    StepCounts,
    WorkflowStats,
    WorkflowInfo,
    WorkflowAnalysis,
)

__all__ = [
    "StepCategory",
    "Position",
    "Node",
    "ConnectionTarget",
    "ConnectionMap",
    "WorkflowGraph",
    "OrderedStep",
    "StepConfig",
    "AIConfig",
    "HttpHeader",
    "HttpConfig",
    "CodeConfig",
    "ExtractedConfig",
    "ClassifiedStep",
    "StepCounts",
    "WorkflowStats",
    "WorkflowInfo",
    "WorkflowAnalysis",
]
