"""
Infrastructure layer for please.

Contains abstractions for external systems:
- RegistryVersionClient: Container registry tag listing (version discovery)

These provide clean interfaces that can be mocked for testing.
"""

from .registry_client import RegistryVersionClient, parse_image_reference

__all__ = [
    'RegistryVersionClient',
    'parse_image_reference',
]
