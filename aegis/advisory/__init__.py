"""Advisory collaborator interface."""

from .situation import (
    Advisor,
    OfflineAdvisor,
    SituationReport,
    build_situation_report,
    format_briefing,
)

__all__ = [
    "Advisor",
    "OfflineAdvisor",
    "SituationReport",
    "build_situation_report",
    "format_briefing",
]
