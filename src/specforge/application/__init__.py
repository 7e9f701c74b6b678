"""
Application layer for specforge.

Contains the services that orchestrate prompts, providers, parsing and
ordering into generation runs.
"""

from specforge.application.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerRegistry,
)
from specforge.application.code_generation import CodeGenerationService
from specforge.application.code_parsing import CodeParsingService
from specforge.application.database import DatabaseGenerationService
from specforge.application.notification_emitter import (
    LoggingNotifier,
    NotificationEmitter,
)
from specforge.application.pipeline import GenerationPipeline, render_template

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerRegistry",
    "CodeGenerationService",
    "CodeParsingService",
    "DatabaseGenerationService",
    "GenerationPipeline",
    "LoggingNotifier",
    "NotificationEmitter",
    "render_template",
]
