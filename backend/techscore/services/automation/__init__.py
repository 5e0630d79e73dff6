"""
Technical Analysis Automation Service

Scheduled batch scoring of the tracked symbol universe.
Each run loads stored bars, calls the indicator engine and persists a
flattened record per symbol.
"""

from techscore.services.automation.records import build_record
from techscore.services.automation.service import (
    BatchRunSummary,
    TechnicalAnalysisAutomation,
    get_automation,
)

__all__ = [
    "build_record",
    "BatchRunSummary",
    "TechnicalAnalysisAutomation",
    "get_automation",
]
