"""Workflow orchestration."""

from .workflow import Workflow, create_workflow

__all__ = ["Workflow", "create_workflow"]
