"""Rewriter / analysis engine contracts and the diagnostics interceptor."""

from twoslashmap.engine.interceptor import FilteringLanguageService, wrap_service_factory
from twoslashmap.engine.types import (
    AnalysisResult,
    AnalyzeOptions,
    Analyzer,
    Diagnostic,
    EngineDiagnostic,
    EngineError,
    LanguageService,
    QuickInfo,
    RewriteMode,
    Rewriter,
    RewriteResult,
    ServiceFactory,
)

__all__ = [
    "AnalysisResult",
    "AnalyzeOptions",
    "Analyzer",
    "Diagnostic",
    "EngineDiagnostic",
    "EngineError",
    "FilteringLanguageService",
    "LanguageService",
    "QuickInfo",
    "RewriteMode",
    "RewriteResult",
    "Rewriter",
    "ServiceFactory",
    "wrap_service_factory",
]
