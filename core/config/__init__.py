"""
Kirana Core Config - Public API
=================================
Shop tunables (cost basis, restock shortcut, dashboard thresholds).
Doctrine: No magic numbers in engine logic.
"""

from core.config.settings import PosSettings

__all__ = [
    "PosSettings",
]
