"""Utility to print an analyzed workflow as a clean text tutorial."""

import sys
from pathlib import Path
from typing import Union

from workflow_steps.analysis import analyze_workflow
from workflow_steps.config import get_settings
from workflow_steps.models.analysis import WorkflowAnalysis
from workflow_steps.models.workflow import StepCategory


def print_analysis(analysis: WorkflowAnalysis, include_source: bool = False) -> str:
    """
    Convert a WorkflowAnalysis to a text representation.

    Args:
        analysis: Result of analyze_workflow()
        include_source: Include full code sources (default: first lines only)

    Returns:
        Formatted string representation of the analysis
    """
    lines = []

    if analysis.has_error or analysis.workflow is None:
        lines.append("=" * 60)
        lines.append("  WORKFLOW: unable to analyze")
        lines.append(f"  Error: {analysis.error or 'unknown error'}")
        lines.append("=" * 60)
        return "\n".join(lines)

    info = analysis.workflow
    counts = analysis.counts

    # Header
    lines.append("=" * 60)
    lines.append(f"  WORKFLOW: {info.name}")
    lines.append("=" * 60)
    lines.append(f"  Nodes: {info.node_count}  Difficulty: {info.difficulty}")
    if info.tags:
        lines.append(f"  Tags: {', '.join(info.tags)}")
    lines.append(
        f"  Steps: {counts.total_steps} "
        f"(AI {counts.ai}, HTTP {counts.http}, Code {counts.code}, Other {counts.generic})"
    )
    lines.append("")

    # Ordered steps
    lines.append("  STEPS:")
    lines.append("  " + "-" * 56)
    for classified in analysis.steps:
        step = classified.step
        icon = _get_category_icon(classified.category)
        short_type = step.type.replace("n8n-nodes-base.", "").replace("@n8n/n8n-nodes-langchain.", "")

        flags = []
        if step.is_trigger:
            flags.append("trigger")
        if step.is_disconnected:
            flags.append("disconnected")
        suffix = f"  [{', '.join(flags)}]" if flags else ""

        lines.append(f"  {icon} [{step.step_number}] {step.name}{suffix}")
        lines.append(f"       Type: {short_type} ({classified.type_label})")
    lines.append("")

    if analysis.ai_steps:
        lines.append("  AI INTEGRATION:")
        lines.append("  " + "-" * 56)
        for ai in analysis.ai_steps:
            lines.append(f"  🤖 [{ai.step_number}] {ai.title}")
            lines.append(f"       Provider: {ai.provider}")
            lines.append(f"       Model: {ai.model or 'Default Model'}")
            if ai.system_message:
                lines.append(f"       System: {_truncate(ai.system_message)}")
            if ai.prompt:
                lines.append(f"       Prompt: {_truncate(ai.prompt)}")
        lines.append("")

    if analysis.http_steps:
        lines.append("  API REQUESTS:")
        lines.append("  " + "-" * 56)
        for http in analysis.http_steps:
            lines.append(f"  🌐 [{http.step_number}] {http.title}")
            lines.append(f"       {http.description}")
            for curl_line in http.curl_command.split("\n"):
                lines.append(f"       {curl_line}")
        lines.append("")

    if analysis.code_steps:
        lines.append("  CUSTOM CODE:")
        lines.append("  " + "-" * 56)
        for code in analysis.code_steps:
            lines.append(f"  💻 [{code.step_number}] {code.title}")
            lines.append(
                f"       {code.language}, {code.line_count} lines, {code.complexity}"
            )
            if code.function_names:
                lines.append(f"       Declares: {', '.join(code.function_names)}")
            lines.append(f"       {code.description}")
            source_lines = code.source.splitlines()
            if not include_source and len(source_lines) > 4:
                source_lines = source_lines[:4] + [f"... ({len(source_lines) - 4} more lines)"]
            for source_line in source_lines:
                lines.append(f"         {source_line}")
        lines.append("")

    lines.append("=" * 60)

    return "\n".join(lines)


def _get_category_icon(category: StepCategory) -> str:
    """Get an icon for a step category."""
    icons = {
        StepCategory.AI: "🤖",
        StepCategory.HTTP: "🌐",
        StepCategory.CODE: "💻",
        StepCategory.GENERIC: "⚙️",
    }
    return icons.get(category, "•")


def _truncate(value: str, max_len: int = 60) -> str:
    """Single-line preview of a long text."""
    flat = " ".join(value.split())
    if len(flat) > max_len:
        return f"{flat[:max_len]}..."
    return flat


def print_n8n_workflow(workflow_json: Union[str, dict], include_source: bool = False) -> None:
    """
    Analyze an n8n workflow and print the tutorial to stdout.

    Args:
        workflow_json: JSON string or dict of n8n workflow
        include_source: Print full code sources
    """
    analysis = analyze_workflow(workflow_json, **get_settings().analyzer_options())
    print(print_analysis(analysis, include_source=include_source))


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: python -m workflow_steps.utils.workflow_printer <workflow.json>")
        sys.exit(2)

    from workflow_steps.logging_setup import configure_logging

    configure_logging(get_settings())
    document = Path(sys.argv[1]).read_text(encoding="utf-8")
    print_n8n_workflow(document, include_source="--full" in sys.argv)
