# SPDX-License-Identifier: MIT-0

"""Build a small scene in code, unify its shapes and print it as VRML97."""

from vrml_fixer.fixes import unify_shapes
from vrml_fixer.scene import Appearance, Coordinate, Group, IndexedFaceSet, Material, Scene, Shape
from vrml_fixer.writer import to_vrml_string


def make_quad(appearance, z):
    points = [(0, 0, z), (1, 0, z), (1, 1, z), (0, 1, z)]
    return Shape(
        appearance=appearance,
        geometry=IndexedFaceSet(coord=Coordinate(point=points), coordIndex=[0, 1, 2, 3, -1]),
    )


red = Appearance(material=Material(diffuseColor=(1.0, 0.0, 0.0)))
scene = Scene([Group(children=[make_quad(red, 0.0), make_quad(red, 1.0), make_quad(red, 0.0)])])

unify_shapes(scene.root)
print(to_vrml_string(scene, indent=2))
