"""Managed database package."""

from ledger_sync.services.managed.supabase_backend import ManagedBackendClient

__all__ = ["ManagedBackendClient"]
