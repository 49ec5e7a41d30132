"""Execution post-processing.

This package holds the binary data id model, the reconciler that restores
execution ids in placeholder binary data ids, and the execution store it runs
in front of.
"""

__all__: list[str] = []
