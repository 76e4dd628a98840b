"""
HTTP surface for the subscription event mapper.

- Fire platform hooks for stored subscriptions
- Inspect the hook table
- Inspect events recorded in dry-run mode
"""

from api.main import app

__all__ = ["app"]
