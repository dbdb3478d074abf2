"""
URL safety checks applied before any outbound request.
"""

from .validation import InputValidator, URLValidationRules, validate_url

__all__ = [
    "InputValidator",
    "URLValidationRules",
    "validate_url",
]
