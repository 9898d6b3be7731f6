"""Analysis API endpoints - steps, order and stats for a stored workflow."""
import json
from typing import Optional, Union

import structlog
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from workflow_steps.analysis import (
    analyze_workflow,
    ingest_workflow,
)
from workflow_steps.analysis.analyzer import build_workflow_info
from workflow_steps.analysis.ordering import ExecutionOrderResolver, build_workflow_stats
from workflow_steps.config import get_settings
from workflow_steps.models.analysis import WorkflowAnalysis, WorkflowInfo, WorkflowStats
from workflow_steps.models.workflow import OrderedStep

logger = structlog.get_logger()

router = APIRouter()


class WorkflowDocumentRequest(BaseModel):
    """Request carrying a workflow document as stored by the marketplace."""

    workflow_json: Union[dict, str] = Field(
        ...,
        description="n8n workflow JSON, either parsed or as a string",
    )


class StepOrderResponse(BaseModel):
    """Response for the execution order endpoint."""

    has_error: bool = False
    error: Optional[str] = None
    steps: list[OrderedStep] = Field(default_factory=list)


class WorkflowStatsResponse(BaseModel):
    """Response for the statistics endpoint."""

    has_error: bool = False
    error: Optional[str] = None
    stats: Optional[WorkflowStats] = None
    workflow: Optional[WorkflowInfo] = None


def _check_size(request: WorkflowDocumentRequest) -> None:
    settings = get_settings()
    document = request.workflow_json
    size = len(document) if isinstance(document, str) else len(json.dumps(document, default=str))

    if size > settings.max_document_bytes:
        logger.warning("workflow_too_large", size=size, limit=settings.max_document_bytes)
        raise HTTPException(
            status_code=413,
            detail=f"Workflow document exceeds {settings.max_document_bytes} bytes",
        )


@router.post("/analyze", response_model=WorkflowAnalysis)
async def analyze(request: WorkflowDocumentRequest) -> WorkflowAnalysis:
    """
    Analyze a workflow for the step-by-step tutorial view.

    Returns the ordered steps with their categories, the AI / HTTP / code
    configurations ready to copy, and summary counts. An unusable document
    yields has_error=True rather than an error status, so the page can
    render a failure state.
    """
    _check_size(request)
    settings = get_settings()

    analysis = analyze_workflow(request.workflow_json, **settings.analyzer_options())
    if analysis.has_error:
        logger.info("analyze_structural_error", error=analysis.error)
    return analysis


@router.post("/steps/order", response_model=StepOrderResponse)
async def steps_in_order(request: WorkflowDocumentRequest) -> StepOrderResponse:
    """Nodes in execution order with trigger / starting / disconnected flags."""
    _check_size(request)
    settings = get_settings()

    ingested = ingest_workflow(request.workflow_json)
    if ingested.has_error:
        return StepOrderResponse(has_error=True, error=ingested.error)

    steps = ExecutionOrderResolver(settings.max_iteration_factor).resolve(ingested.graph)
    return StepOrderResponse(steps=steps)


@router.post("/steps/stats", response_model=WorkflowStatsResponse)
async def steps_stats(request: WorkflowDocumentRequest) -> WorkflowStatsResponse:
    """Execution statistics and header information."""
    _check_size(request)
    settings = get_settings()

    ingested = ingest_workflow(request.workflow_json)
    if ingested.has_error:
        return WorkflowStatsResponse(has_error=True, error=ingested.error)

    steps = ExecutionOrderResolver(settings.max_iteration_factor).resolve(ingested.graph)
    return WorkflowStatsResponse(
        stats=build_workflow_stats(steps),
        workflow=build_workflow_info(ingested.graph, ingested, request.workflow_json),
    )
