"""Result models produced by the workflow analyzer."""
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from workflow_steps.models.workflow import OrderedStep, StepCategory


class StepConfig(BaseModel):
    """Fields shared by every extracted configuration."""

    node_id: str
    name: str
    type: str
    step_number: int
    title: str


class AIConfig(StepConfig):
    """Copyable configuration of an AI / model-provider node."""

    category: Literal[StepCategory.AI] = StepCategory.AI
    provider: str = Field(..., description="Display label of the provider")
    ai_category: str = Field(..., description="Chat model, agent, ...")
    model: Optional[str] = None
    system_message: Optional[str] = None
    prompt: Optional[str] = None
    options: dict[str, Any] = Field(default_factory=dict)


class HttpHeader(BaseModel):
    """A single request header."""

    name: str
    value: str


class HttpConfig(StepConfig):
    """Copyable configuration of an HTTP request / webhook node."""

    category: Literal[StepCategory.HTTP] = StepCategory.HTTP
    method: str = "GET"
    url: str
    headers: list[HttpHeader] = Field(default_factory=list)
    body: Optional[str] = None
    body_type: str = "none"
    parsed_json_body: Optional[Any] = None
    authentication: Optional[str] = None
    domain: str
    description: str
    curl_command: str


class CodeConfig(StepConfig):
    """Copyable configuration of a script-execution node."""

    category: Literal[StepCategory.CODE] = StepCategory.CODE
    language: str = "javascript"
    source: str = ""
    function_names: list[str] = Field(default_factory=list)
    complexity: Literal["Simple", "Moderate", "Complex"] = "Simple"
    line_count: int = 0
    description: str = ""
    operations: list[str] = Field(default_factory=list)


ExtractedConfig = Annotated[
    Union[AIConfig, HttpConfig, CodeConfig],
    Field(discriminator="category"),
]


class ClassifiedStep(BaseModel):
    """An ordered step with its category and, if any, extracted config."""

    step: OrderedStep
    category: StepCategory
    type_label: str
    config: Optional[ExtractedConfig] = None


class StepCounts(BaseModel):
    """Summary counts for presentation."""

    total_steps: int = 0
    ai: int = 0
    http: int = 0
    code: int = 0
    generic: int = 0


class WorkflowStats(BaseModel):
    """Execution statistics of an ordered workflow."""

    total_steps: int = 0
    trigger_steps: int = 0
    action_steps: int = 0
    disconnected_steps: int = 0
    starting_steps: int = 0
    node_types: list[str] = Field(default_factory=list)
    complexity: Literal["Simple", "Moderate", "Complex"] = "Simple"


class WorkflowInfo(BaseModel):
    """Header information about the analyzed document."""

    name: str = "Unnamed Workflow"
    node_count: int = 0
    connection_count: int = 0
    tags: list[str] = Field(default_factory=list)
    description: str = ""
    difficulty: Literal["Basic", "Intermediate", "Advanced"] = "Basic"


class WorkflowAnalysis(BaseModel):
    """Everything the presentation layer needs to render a workflow."""

    has_error: bool = False
    error: Optional[str] = None
    workflow: Optional[WorkflowInfo] = None
    steps: list[ClassifiedStep] = Field(default_factory=list)
    ai_steps: list[AIConfig] = Field(default_factory=list)
    http_steps: list[HttpConfig] = Field(default_factory=list)
    code_steps: list[CodeConfig] = Field(default_factory=list)
    counts: StepCounts = Field(default_factory=StepCounts)

    @classmethod
    def failed(cls, error: str) -> "WorkflowAnalysis":
        """Renderable failure state with empty collections."""
        return cls(has_error=True, error=error)
