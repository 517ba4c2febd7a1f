# Commy API Module
"""
commy.api - Python API (Commy Facade)
"""

from commy.api.base import CommyConfig, ReportResult, StatsScope
from commy.api.commy import Commy, create_commy
from commy.api.config import ConfigManager, load_config

__all__ = [
    "CommyConfig",
    "ReportResult",
    "StatsScope",
    "Commy",
    "create_commy",
    "ConfigManager",
    "load_config",
]
