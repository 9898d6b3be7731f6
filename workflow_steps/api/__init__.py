"""API route modules."""
from workflow_steps.api import analyze

__all__ = ["analyze"]
