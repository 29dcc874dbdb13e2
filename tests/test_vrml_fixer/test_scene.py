# SPDX-License-Identifier: MIT
"""Tests for fields, nodes and scene graph traversal."""

import pytest


class TestFields:
    """Tests for field containers."""

    def test_declared_default_is_default(self):
        """Test a field built with a non-standard default counts as default."""
        from vrml_fixer.scene.fields import SFVec3f

        field = SFVec3f((1.0, 1.0, 1.0))

        assert field.is_default()
        field.value = (1.0, 1.0, 2.0)
        assert not field.is_default()

    def test_transform_scale_default(self):
        """Test Transform scale defaults to 1 1 1 and is elided as such."""
        from vrml_fixer.scene import Transform, Vec3

        t = Transform()

        assert t.scale == Vec3(1.0, 1.0, 1.0)
        assert t["scale"].is_default()
        assert t["translation"].is_default()

    def test_make_default_is_fresh(self):
        """Test make_default returns a new instance holding the default."""
        from vrml_fixer.scene.fields import MFInt32

        field = MFInt32()
        field.extend([1, 2, 3])
        fresh = field.make_default()

        assert fresh is not field
        assert list(fresh) == []
        assert not field.is_default()

    def test_values_are_coerced(self):
        """Test assigned values become the field's value type."""
        from vrml_fixer.scene.fields import RGB, Rotation, SFColor, SFRotation

        color = SFColor()
        color.value = [1, 0, 0]
        rotation = SFRotation()
        rotation.value = (0, 1, 0, 3)

        assert color.value == RGB(1.0, 0.0, 0.0)
        assert rotation.value == Rotation(0.0, 1.0, 0.0, 3.0)

    def test_node_field_equality_is_identity(self):
        """Test node references compare by identity, not by content."""
        from vrml_fixer.scene import Group
        from vrml_fixer.scene.fields import MFNode, SFNode

        a, b = Group(), Group()

        assert SFNode(a) == SFNode(a)
        assert SFNode(a) != SFNode(b)
        assert MFNode([a, b]) == MFNode([a, b])
        assert MFNode([a, b]) != MFNode([a, Group()])

    def test_parse_components(self):
        """Test decoding textual components."""
        from vrml_fixer.scene.fields import SFBool, SFInt32, SFVec3f, Vec3

        assert SFBool.parse_components(["TRUE"]) is True
        assert SFBool.parse_components(["false"]) is False
        assert SFInt32.parse_components(["0x10"]) == 16
        assert SFVec3f.parse_components(["1", "2.5", "-3"]) == Vec3(1.0, 2.5, -3.0)

    def test_parse_components_wrong_count(self):
        """Test a wrong component count is rejected."""
        from vrml_fixer.errors import MalformedValueError
        from vrml_fixer.scene.fields import SFVec3f

        with pytest.raises(MalformedValueError):
            SFVec3f.parse_components(["1", "2"])

    def test_parse_components_bad_number(self):
        """Test a non-numeric component is rejected."""
        from vrml_fixer.errors import MalformedValueError
        from vrml_fixer.scene.fields import SFBool, SFFloat

        with pytest.raises(MalformedValueError):
            SFFloat.parse_components(["abc"])
        with pytest.raises(MalformedValueError):
            SFBool.parse_components(["yes"])

    def test_parse_values(self):
        """Test splitting a flat token list into items."""
        from vrml_fixer.errors import MalformedValueError
        from vrml_fixer.scene.fields import MFVec2f, Vec2

        assert MFVec2f.parse_values(["0", "1", "2", "3"]) == [Vec2(0.0, 1.0), Vec2(2.0, 3.0)]
        with pytest.raises(MalformedValueError):
            MFVec2f.parse_values(["0", "1", "2"])


class TestNodes:
    """Tests for node kinds and the registry."""

    def test_nodes_compare_by_identity(self):
        """Test two equal-looking nodes are distinct."""
        from vrml_fixer.scene import Group

        a, b = Group(), Group()

        assert a != b
        assert len({a, b}) == 2

    def test_create_node(self):
        """Test creating registered node kinds by name."""
        from vrml_fixer.scene import NODE_TYPES, Material, create_node

        node = create_node("Material")

        assert isinstance(node, Material)
        assert "Scene" not in NODE_TYPES

    def test_create_unknown_node(self):
        """Test an unknown kind raises UnsupportedNodeError."""
        from vrml_fixer.errors import UnsupportedNodeError
        from vrml_fixer.scene import create_node

        with pytest.raises(UnsupportedNodeError, match="Foo"):
            create_node("Foo")
        with pytest.raises(NotImplementedError):
            create_node("Foo")

    def test_unknown_field_keyword(self):
        """Test initializing a field the node doesn't have."""
        from vrml_fixer.scene import Group

        with pytest.raises(KeyError):
            Group(nonsense=1)

    def test_unexposed_fields(self):
        """Test event slots of grouping nodes aren't exposed."""
        from vrml_fixer.scene import Transform

        exposed = Transform().exposed_fields

        assert "children" in exposed
        assert "translation" in exposed
        assert "addChildren" not in exposed
        assert "removeChildren" not in exposed

    def test_switch_children_are_choice(self):
        """Test Switch keeps its children in the choice field."""
        from vrml_fixer.scene import Group, Switch

        child = Group()
        switch = Switch(choice=[child])

        assert list(switch.children) == [child]
        assert switch.which_choice == -1


class TestSceneGraph:
    """Tests for traversal helpers."""

    def test_walk_visits_shared_node_once(self):
        """Test a node referenced twice is walked once."""
        from vrml_fixer.scene import Group, Scene, walk

        shared = Group()
        scene = Scene([Group(children=[shared]), Group(children=[shared])])

        nodes = list(walk(scene.root))

        assert nodes.count(shared) == 1
        assert nodes[0] is scene.root
        assert len(nodes) == 4

    def test_walk_is_preorder(self):
        """Test walk yields parents before children, in field order."""
        from vrml_fixer.scene import Group, Scene, walk

        a_child = Group()
        a, b = Group(children=[a_child]), Group()
        scene = Scene([a, b])

        assert list(walk(scene.root)) == [scene.root, a, a_child, b]

    def test_count_references(self):
        """Test reference counting over shared nodes."""
        from vrml_fixer.scene import Appearance, Material, Scene, Shape, count_references

        material = Material()
        first = Shape(appearance=Appearance(material=material))
        second = Shape(appearance=Appearance(material=material))
        scene = Scene([first, second])

        counts = count_references(scene.root)

        assert counts[scene.root] == 1
        assert counts[material] == 2
        assert counts[first] == 1

    def test_get_nodes_of_type(self):
        """Test filtering reachable nodes by class."""
        from vrml_fixer.scene import Group, Scene, Shape

        shape = Shape()
        scene = Scene([Group(children=[shape])])

        assert scene.get_nodes_of_type(Shape) == [shape]
        assert scene.root not in scene.get_all_nodes()
