# SPDX-License-Identifier: MIT
"""Shared fixtures for vrml_fixer tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by the CLI so they don't outlive captured streams."""
    yield
    logger = logging.getLogger("vrml_fixer")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def make_triangle_shape(appearance, points, coord_index=(0, 1, 2, -1)):
    """Shape with an IndexedFaceSet over ``points``."""
    from vrml_fixer.scene.nodes import Coordinate, IndexedFaceSet, Shape

    geometry = IndexedFaceSet(
        coord=Coordinate(point=points),
        coordIndex=list(coord_index),
    )
    return Shape(appearance=appearance, geometry=geometry)


@pytest.fixture
def make_shape():
    return make_triangle_shape


@pytest.fixture
def appearance():
    from vrml_fixer.scene.nodes import Appearance, Material

    return Appearance(material=Material(diffuseColor=(1.0, 0.0, 0.0)))


@pytest.fixture
def two_triangle_scene(appearance):
    """Two disjoint triangles in separate shapes sharing one appearance."""
    from vrml_fixer.scene import Group, Scene

    first = make_triangle_shape(appearance, [(0, 0, 0), (1, 0, 0), (0, 1, 0)])
    second = make_triangle_shape(appearance, [(0, 0, 1), (1, 0, 1), (0, 1, 1)])
    group = Group(children=[first, second])
    return Scene([group])


SAMPLE_VRML = """#VRML V2.0 utf8
# two shapes sharing a material
DEF Root Transform {
  translation 1 2 3
  children [
    Shape {
      appearance Appearance {
        material DEF Red Material { diffuseColor 1 0 0 }
      }
      geometry IndexedFaceSet {
        coord Coordinate { point [ 0 0 0, 1 0 0, 0 1 0 ] }
        coordIndex [ 0 1 2 -1 ]
      }
    }
    Shape {
      appearance Appearance { material USE Red }
      geometry IndexedLineSet {
        coord Coordinate { point [ 0 0 0, 1 1 1 ] }
        coordIndex [ 0 1 -1 ]
      }
    }
  ]
}
"""


@pytest.fixture
def sample_vrml():
    return SAMPLE_VRML


@pytest.fixture
def sample_vrml_file(tmp_path):
    path = tmp_path / "scene.wrl"
    path.write_text(SAMPLE_VRML, encoding="utf-8")
    return path
