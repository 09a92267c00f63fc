"""
Kirana State - Public API
===========================
"""

from core.state.snapshot import ActiveView, PosState

__all__ = [
    "ActiveView",
    "PosState",
]
