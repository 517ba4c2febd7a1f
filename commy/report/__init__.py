# Report Module
"""
Per-author reformulation and Markdown report assembly.
"""

from commy.report.assembler import ReportAssembler
from commy.report.orchestrator import ReformulationOrchestrator, fallback_text

__all__ = [
    "ReportAssembler",
    "ReformulationOrchestrator",
    "fallback_text",
]
