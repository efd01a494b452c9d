"""
Model client exports.
"""

from testpilot.models.openai_client import OpenAIClient

__all__ = ["OpenAIClient"]
