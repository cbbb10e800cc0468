"""
Storage module.

Handles persistence of ideas, groups and settings via Supabase or an
in-memory stand-in.
"""

from ideahub.storage.base import Storage, StorageError
from ideahub.storage.supabase import SupabaseStorage, MockSupabaseStorage

__all__ = [
    "Storage",
    "StorageError",
    "SupabaseStorage",
    "MockSupabaseStorage",
]
