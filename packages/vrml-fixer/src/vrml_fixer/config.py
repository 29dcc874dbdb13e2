# SPDX-License-Identifier: MIT
"""Pipeline configuration and its named presets."""

from __future__ import annotations

import dataclasses as dc
import typing

from vrml_fixer.fixes.prune import PruneRules
from vrml_fixer.scene.fields import RGB

PresetName = typing.Literal["unify", "cleanup"]


@dc.dataclass
class PipelineConfig:
    """Which transformations run, and how.

    Stages always run in the order prune, fold, unify, cleanup.
    """

    prune_junk: bool = False
    """Remove line-set shapes, excluded shapes and emptied groups."""

    fold_transforms: bool = False
    """Merge sibling transforms with identical parameters."""

    unify_shapes: bool = False
    """Merge face-set shapes per appearance; merged face sets are not solid."""

    cleanup: bool = False
    """Run the structural cleanup pass."""

    prune_rules: PruneRules = dc.field(default_factory=PruneRules)
    """Junk criteria used by the prune stage."""

    ignore_winding: bool = True
    """Treat faces with the same points in reverse order as duplicates."""

    force_solid: typing.Optional[bool] = None
    """Value the cleanup pass gives every IndexedFaceSet ``solid``, or None."""

    ambient_intensity: float = 0.2
    shininess: float = 0.2
    specular_color: RGB = RGB(0.0, 0.0, 0.0)
    """Material values the cleanup pass resets."""

    indent: int = 0
    """Spaces per nesting level in the output."""

    def __post_init__(self) -> None:
        if self.indent < 0:
            raise ValueError(f"Expected a non-negative indent, got {self.indent}")
        if self.unify_shapes and self.cleanup and self.force_solid:
            raise ValueError(
                "Shape unification writes solid FALSE face sets; combining it with "
                "a cleanup that forces solid TRUE would undo it. Pick one preset."
            )

    @classmethod
    def from_preset(cls, name: PresetName, **overrides: typing.Any) -> PipelineConfig:
        """Build a configuration from a named preset.

        Presets:
            unify: prune junk, then merge shapes per appearance (solid FALSE)
            cleanup: fold duplicate transforms, then clean up (solid TRUE)
        """
        if name not in PRESETS:
            raise ValueError(f"Unknown preset {name!r}, expected one of {sorted(PRESETS)}")
        return cls(**{**PRESETS[name], **overrides})


PRESETS: dict[str, dict[str, typing.Any]] = {
    "unify": {"prune_junk": True, "unify_shapes": True},
    "cleanup": {"fold_transforms": True, "cleanup": True, "force_solid": True},
}
