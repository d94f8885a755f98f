"""
Configuration for interview-sim
"""

from interview_sim.config.settings import Settings, get_settings
from interview_sim.config.logging_config import configure_logging

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
]
