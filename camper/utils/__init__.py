"""
Shared utilities for CAMPER.

Common functionality used across contexts:
- Logger setup (Tier 1 logging)
- Job event log (Tier 2 logging)
- Timestamps
"""

from camper.utils.timestamp import expiry_epoch, now, now_exact

__all__ = ["expiry_epoch", "now", "now_exact"]
