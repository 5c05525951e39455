"""Service layer for business logic.

This layer contains the core decision logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> LifecycleController -> Router / StrategyEngine -> Repository
    (HTTP)  -> (Sequencing)        -> (Decisions)              -> (Data Access)
"""

from .background import BackgroundWriter
from .generation_manager import GenerationManager
from .lifecycle import LifecycleController
from .notifications import NotificationService
from .router import Router, build_route_table
from .strategy_engine import StrategyEngine

__all__ = [
    "BackgroundWriter",
    "GenerationManager",
    "LifecycleController",
    "NotificationService",
    "Router",
    "StrategyEngine",
    "build_route_table",
]
