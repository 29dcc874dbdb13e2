# SPDX-License-Identifier: MIT
"""Graph transformations applied between reading and writing a scene."""

from .cleanup import CleanupContext, cleanup, cleanup_scene
from .fold import fold_transforms
from .prune import JunkPruner, PruneRules, prune_junk
from .unify import unify_group, unify_shapes

__all__ = [
    "CleanupContext",
    "cleanup",
    "cleanup_scene",
    "fold_transforms",
    "JunkPruner",
    "PruneRules",
    "prune_junk",
    "unify_group",
    "unify_shapes",
]
