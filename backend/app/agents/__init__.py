"""Agents package - AI/LLM agents using Gemini."""

from app.agents.dashboard_summary import DashboardSummaryAgent, compress_stats

__all__ = [
    "DashboardSummaryAgent",
    "compress_stats",
]
