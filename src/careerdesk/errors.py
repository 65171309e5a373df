"""Application-level exception types for careerdesk."""

from __future__ import annotations


class CareerDeskError(Exception):
    """Base exception for careerdesk."""


class ConfigurationError(CareerDeskError):
    """Base exception for configuration and startup validation errors."""


class ModelNotConfiguredError(ConfigurationError):
    """Raised when model configuration is missing."""


class ApiKeyNotConfiguredError(ConfigurationError):
    """Raised when an API key is required but missing."""


class GenerationError(CareerDeskError):
    """Raised when the generation backend cannot produce a response."""


class EvaluationError(CareerDeskError):
    """Raised when the quality evaluator cannot be reached."""


class MalformedEvaluationError(EvaluationError):
    """Raised when the evaluator answers with a payload missing required fields."""
