"""
Patch Application

Applies model-proposed modifications to project files with backup
and read-after-write verification.
"""

from .applier import PatchApplier, apply_edit

__all__ = ['PatchApplier', 'apply_edit']
