"""
Client module - async HTTP access to the VoiceScribe procedures.
"""

from .api_client import APIClient, APIError

__all__ = ["APIClient", "APIError"]
