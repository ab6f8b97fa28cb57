"""
Local durable storage for Adducation.
"""

from adducation.storage.local_store import LocalStore

__all__ = ["LocalStore"]
