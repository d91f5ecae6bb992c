# ABOUTME: Business logic and orchestration layer
# ABOUTME: Pipeline Stage 3: raw Notion records → assembled entities → written cache

"""
Core Layer: Entity assembly and sync orchestration

This layer handles:
- Fetching database pages and block trees under the shared gate
- Per-kind entity assembly from normalized content
- The run-level orchestration and its all-or-nothing write

Data Flow: notion/ records → content/ normalization → entities → persistence/
"""

from .models import Involvement, Organization, Project, Skill, SyncMeta, SyncResult

# Import the pipeline on-demand to avoid circular imports
# Use: from portfolio_sync.core.pipeline import SyncPipeline

__all__ = [
    "Involvement",
    "Organization",
    "Project",
    "Skill",
    "SyncMeta",
    "SyncResult",
]
