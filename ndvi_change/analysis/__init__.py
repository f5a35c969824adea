"""Analysis orchestration: summary building and page-level session state."""

from ndvi_change.analysis.session import AnalysisSession, AnalysisState, default_dates
from ndvi_change.analysis.summary import build_summary

__all__ = [
    "AnalysisSession",
    "AnalysisState",
    "build_summary",
    "default_dates",
]
