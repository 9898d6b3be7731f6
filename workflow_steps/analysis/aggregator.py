"""Step aggregation - group classified steps for presentation."""
from workflow_steps.models.analysis import (
    AIConfig,
    ClassifiedStep,
    CodeConfig,
    HttpConfig,
    StepCounts,
    WorkflowAnalysis,
    WorkflowInfo,
)
from workflow_steps.models.workflow import StepCategory


class StepAggregator:
    """Collects classified steps into per-category collections and counts."""

    def aggregate(
        self,
        steps: list[ClassifiedStep],
        workflow: WorkflowInfo,
    ) -> WorkflowAnalysis:
        ai_steps: list[AIConfig] = []
        http_steps: list[HttpConfig] = []
        code_steps: list[CodeConfig] = []
        generic = 0

        for classified in steps:
            config = classified.config
            if classified.category == StepCategory.AI and isinstance(config, AIConfig):
                ai_steps.append(config)
            elif classified.category == StepCategory.HTTP and isinstance(config, HttpConfig):
                http_steps.append(config)
            elif classified.category == StepCategory.CODE and isinstance(config, CodeConfig):
                code_steps.append(config)
            else:
                generic += 1

        counts = StepCounts(
            total_steps=len(steps),
            ai=len(ai_steps),
            http=len(http_steps),
            code=len(code_steps),
            generic=generic,
        )

        return WorkflowAnalysis(
            workflow=workflow,
            steps=list(steps),
            ai_steps=ai_steps,
            http_steps=http_steps,
            code_steps=code_steps,
            counts=counts,
        )
