# SPDX-License-Identifier: MIT
"""Read, fix and write a scene in one run."""

from __future__ import annotations

import logging
from pathlib import Path

from vrml_fixer.config import PipelineConfig
from vrml_fixer.fixes import CleanupContext, cleanup_scene, fold_transforms, prune_junk, unify_shapes
from vrml_fixer.parser import read_vrml_file, read_x3d_file
from vrml_fixer.scene import Node, Scene
from vrml_fixer.writer import VrmlWriter

logger = logging.getLogger(__name__)

X3D_SUFFIXES = frozenset({".x3d"})


def read_scene(path: Path | str) -> Scene:
    """Read a VRML97 or X3D file, chosen by suffix."""
    path = Path(path)
    if path.suffix.lower() in X3D_SUFFIXES:
        return read_x3d_file(path)
    return read_vrml_file(path)


def apply_fixes(scene: Scene, config: PipelineConfig, node_ids: dict[Node, int]) -> None:
    """Run the enabled transformations on ``scene`` in place.

    Args:
        scene: Scene to transform
        config: Enabled stages and their parameters
        node_ids: Node numbering the prune rules refer to
    """
    if config.prune_junk:
        logger.debug("Pruning junk")
        prune_junk(scene.root, node_ids, config.prune_rules)
    if config.fold_transforms:
        logger.debug("Folding transforms")
        fold_transforms(scene.root)
    if config.unify_shapes:
        logger.debug("Unifying shapes")
        unify_shapes(scene.root, ignore_winding=config.ignore_winding)
    if config.cleanup:
        logger.debug("Cleaning up")
        context = CleanupContext(
            ambient_intensity=config.ambient_intensity,
            shininess=config.shininess,
            specular_color=config.specular_color,
            force_solid=config.force_solid,
        )
        cleanup_scene(scene, context)


def process_file(input_path: Path | str, output_path: Path | str, config: PipelineConfig) -> VrmlWriter:
    """Read ``input_path``, apply the configured fixes and write VRML97.

    Node ids are assigned before any transformation, so ids in the prune
    rules refer to the input graph.

    Returns:
        The writer, holding node ids and per-node output lengths
    """
    scene = read_scene(input_path)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="\n") as stream:
        writer = VrmlWriter(stream, indent=config.indent)
        node_ids = writer.assign_node_ids(scene.root)
        logger.debug("Numbered %d nodes", len(node_ids))
        apply_fixes(scene, config, node_ids)
        writer.write_scene(scene)
    logger.info("Wrote %s", output_path)
    return writer
