"""Binary Data Reconciler.

Restores execution ids in binary data ids that were written before their
execution was registered:
- configuration loaded from `.env`
- structured logging
- filesystem, object store and in-memory storage backends
"""

__version__ = "0.1.0"

from binary_data_reconciler.execution.config import ReconcilerSettings

__all__ = ["__version__", "ReconcilerSettings"]
