"""
Kirana HTTP API - Dependencies
==============================
Injected collaborators for handler wiring.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config.settings import PosSettings
from core.time.clock import Clock
from engines.actions.services import PosService


@dataclass(frozen=True)
class HttpApiDependencies:
    service: PosService
    clock: Clock
    settings: PosSettings
