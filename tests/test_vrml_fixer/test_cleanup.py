# SPDX-License-Identifier: MIT
"""Tests for the structural cleanup pass."""


class TestCleanup:
    """Tests for cleanup of a scene graph."""

    def test_unwrap_chain(self):
        """Test nested single-child wrappers collapse in one pass."""
        from vrml_fixer.fixes import cleanup_scene
        from vrml_fixer.scene import Group, Scene, Shape, Transform

        shape = Shape()
        scene = Scene([Group(children=[Transform(children=[Group(children=[shape])])])])

        context = cleanup_scene(scene)

        assert list(scene.children) == [shape]
        assert context.unwrapped == 3

    def test_non_identity_transform_kept(self):
        """Test a transform that moves its child is not unwrapped."""
        from vrml_fixer.fixes import cleanup_scene
        from vrml_fixer.scene import Scene, Shape, Transform

        transform = Transform(translation=(0, 0, 1), children=[Shape()])
        scene = Scene([transform])

        cleanup_scene(scene)

        assert list(scene.children) == [transform]

    def test_group_with_two_children_kept(self):
        """Test only single-child groups are unwrapped."""
        from vrml_fixer.fixes import cleanup_scene
        from vrml_fixer.scene import Group, Scene, Shape

        group = Group(children=[Shape(), Shape()])
        scene = Scene([group])

        cleanup_scene(scene)

        assert list(scene.children) == [group]

    def test_shared_wrapper_replaced_consistently(self):
        """Test a wrapper reached twice is replaced by the same node both times."""
        from vrml_fixer.fixes import cleanup_scene
        from vrml_fixer.scene import Group, Scene, Shape

        shape = Shape()
        wrapper = Group(children=[shape])
        scene = Scene([Group(children=[wrapper, Shape()]), Group(children=[wrapper, Shape()])])

        context = cleanup_scene(scene)

        first, second = scene.children
        assert first.children[0] is shape
        assert second.children[0] is shape
        assert context.unwrapped == 1

    def test_appearances_shared(self):
        """Test appearances wrapping the same material collapse onto the first."""
        from vrml_fixer.fixes import cleanup_scene
        from vrml_fixer.scene import Appearance, Group, Material, Scene, Shape

        material = Material()
        first = Shape(appearance=Appearance(material=material))
        second = Shape(appearance=Appearance(material=material))
        scene = Scene([Group(children=[first, second])])

        context = cleanup_scene(scene)

        assert second.appearance is first.appearance
        assert context.shared_appearances == 1

    def test_appearances_keyed_on_material_only(self):
        """Test the material alone decides sharing, whatever the textures."""
        from vrml_fixer.fixes import cleanup_scene
        from vrml_fixer.scene import Appearance, Group, Material, Scene, Shape
        from vrml_fixer.scene.nodes import ImageTexture

        material = Material()
        first = Shape(appearance=Appearance(material=material, texture=ImageTexture(url=["a.png"])))
        second = Shape(appearance=Appearance(material=material, texture=ImageTexture(url=["b.png"])))
        other = Shape(appearance=Appearance(material=Material()))
        scene = Scene([Group(children=[first, second, other])])

        context = cleanup_scene(scene)

        assert second.appearance is first.appearance
        assert other.appearance is not first.appearance
        assert context.appearances == {material: first.appearance, other.appearance.material: other.appearance}

    def test_appearance_cache_scoped_to_context(self):
        """Test a fresh context doesn't reuse appearances from an earlier run."""
        from vrml_fixer.fixes import CleanupContext, cleanup
        from vrml_fixer.scene import Appearance, Material, Shape

        material = Material()
        first = Shape(appearance=Appearance(material=material))
        second = Shape(appearance=Appearance(material=material))
        original = second.appearance

        cleanup(first, CleanupContext())
        cleanup(second, CleanupContext())

        assert second.appearance is original

    def test_zero_rotation_canonicalized(self):
        """Test a zero-angle rotation about any axis becomes the default."""
        from vrml_fixer.fixes import cleanup_scene
        from vrml_fixer.scene import Rotation, Scene, Shape, Transform

        transform = Transform(rotation=(1, 0, 0, 0), children=[Shape(), Shape()])
        scene = Scene([transform])

        cleanup_scene(scene)

        assert transform.rotation == Rotation.identity()
        assert transform["rotation"].is_default()

    def test_zero_rotation_wrapper_unwrapped(self):
        """Test an identity transform with an odd zero rotation is unwrapped."""
        from vrml_fixer.fixes import cleanup_scene
        from vrml_fixer.scene import Scene, Shape, Transform

        shape = Shape()
        scene = Scene([Transform(rotation=(0, 1, 0, 0), children=[shape])])

        cleanup_scene(scene)

        assert list(scene.children) == [shape]

    def test_material_values_reset(self):
        """Test material constants are reset to the configured values."""
        from vrml_fixer.fixes import CleanupContext, cleanup_scene
        from vrml_fixer.scene import RGB, Material, Scene

        material = Material(ambientIntensity=0.9, shininess=0.7, specularColor=(1, 1, 1))
        scene = Scene([material])

        cleanup_scene(scene, CleanupContext(shininess=0.5))

        assert material.ambient_intensity == 0.2
        assert material.shininess == 0.5
        assert material.specular_color == RGB(0.0, 0.0, 0.0)

    def test_force_solid(self):
        """Test face sets get the configured solid value."""
        from vrml_fixer.fixes import CleanupContext, cleanup_scene
        from vrml_fixer.scene import IndexedFaceSet, Scene

        forced = IndexedFaceSet(solid=False)
        cleanup_scene(Scene([forced]))

        untouched = IndexedFaceSet(solid=False)
        cleanup_scene(Scene([untouched]), CleanupContext(force_solid=None))

        assert forced.solid is True
        assert untouched.solid is False
