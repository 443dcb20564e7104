from dataclasses import asdict

from agentdump.models import (
    ClassInfo,
    DumpStats,
    FieldInfo,
    MethodInfo,
    Parameter,
    PropertyInfo,
)


def test_full_name_with_namespace():
    cls = ClassInfo(name="Player", type_def_index=1, namespace="Game.Actors")
    assert cls.full_name == "Game.Actors.Player"


def test_full_name_in_global_namespace():
    cls = ClassInfo(name="Player", type_def_index=1)
    assert cls.full_name == "Player"


def test_class_defaults():
    cls = ClassInfo(name="Player", type_def_index=1)

    assert cls.kind == "class"
    assert cls.base_class is None
    assert cls.interfaces == ()
    assert cls.fields == ()
    assert cls.methods == ()
    assert cls.properties == ()
    assert cls.end_line is None


def test_class_modifier_flags_use_whole_words():
    cls = ClassInfo(name="A", type_def_index=1, modifiers=frozenset({"public", "sealed"}))

    assert cls.is_public
    assert cls.is_sealed
    assert not cls.is_static
    assert not cls.is_abstract


def test_modifier_flags_ignore_incidental_substrings():
    # "staticky" is not a modifier word, so it must not read as static
    method = MethodInfo(name="M", return_type="void", modifiers=frozenset({"staticky"}))

    assert not method.is_static


def test_unity_markers_match_base_class_substring():
    mono = ClassInfo(name="A", type_def_index=1, base_class="UnityEngine.MonoBehaviour")
    scriptable = ClassInfo(name="B", type_def_index=2, base_class="ScriptableObject")
    plain = ClassInfo(name="C", type_def_index=3)

    assert mono.is_mono_behaviour
    assert not mono.is_scriptable_object
    assert scriptable.is_scriptable_object
    assert not plain.is_mono_behaviour
    assert not plain.is_scriptable_object


def test_member_counts():
    cls = ClassInfo(
        name="A",
        type_def_index=1,
        fields=(FieldInfo(name="x", type="int"), FieldInfo(name="y", type="int")),
        methods=(MethodInfo(name="M", return_type="void"),),
        properties=(PropertyInfo(name="P", type="int", has_getter=True),),
    )

    assert cls.field_count == 2
    assert cls.method_count == 1
    assert cls.property_count == 1


def test_field_flags():
    f = FieldInfo(name="x", type="int", modifiers=frozenset({"private", "static", "readonly"}))

    assert f.is_private
    assert f.is_static
    assert f.is_readonly
    assert not f.is_const
    assert not f.is_public


def test_method_signature_and_parameter_count():
    method = MethodInfo(
        name="Move",
        return_type="bool",
        parameters=(Parameter(name="dir", type="Vector3"), Parameter(name="speed", type="float")),
        modifiers=frozenset({"public", "override"}),
    )

    assert method.signature == "bool Move(Vector3 dir, float speed)"
    assert method.parameter_count == 2
    assert method.is_override
    assert method.is_public


def test_method_without_parameters_signature():
    assert MethodInfo(name="Jump", return_type="void").signature == "void Jump()"


def test_stats_to_dict():
    stats = DumpStats(total_classes=3, kinds={"class": 3})

    data = asdict(stats)
    assert data["total_classes"] == 3
    assert data["kinds"] == {"class": 3}
    assert data["mono_behaviours"] == 0


def test_entities_compare_by_value():
    assert Parameter(name="a", type="int") == Parameter(name="a", type="int")
    assert FieldInfo(name="x", type="int", offset="0x10") != FieldInfo(name="x", type="int", offset="0x18")
