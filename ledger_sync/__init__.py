"""
Ledger Sync

The data-synchronization layer of a personal income/expense ledger.
Decides where ledger entries live, mirrors remote state into a local
store and survives the failure modes of third-party HTTP endpoints.

DESIGN PRINCIPLES:
1. The backend is chosen fresh from configuration on every action
2. Remote results are authoritative; the local store is a mirror
3. Clients fail loudly, the coordinator reports and falls back
4. Reads always have something to show; writes never fake success
5. Storage backends are swappable behind one interface
"""

__version__ = "1.0.0"
__author__ = "Ledger Sync Team"
