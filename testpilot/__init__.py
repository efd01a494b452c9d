"""
TestPilot - AI-assisted web test generation and Playwright execution.
"""

__version__ = "0.1.0"
