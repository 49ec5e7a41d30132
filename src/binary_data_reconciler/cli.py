"""Console entrypoint.

The CLI is implemented in `binary_data_reconciler.execution.main`.
"""

from __future__ import annotations

from binary_data_reconciler.execution.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
