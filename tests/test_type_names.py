from collections import OrderedDict

import pytest

from assemblage.errors import TypeNotFoundError
from assemblage.type_names import qualified_name, resolve_type
from sample_components import IntHolder, Outer


@pytest.mark.parametrize(
    "type_name, expected",
    [
        ("sample_components.IntHolder", IntHolder),
        ("sample_components:IntHolder", IntHolder),
        ("sample_components.Outer.Inner", Outer.Inner),
        ("sample_components:Outer.Inner", Outer.Inner),
        ("collections.OrderedDict", OrderedDict),
        ("str", str),
        ("builtins.int", int),
    ],
)
def test_resolves_type_names(type_name, expected):
    assert resolve_type(type_name) is expected


@pytest.mark.parametrize(
    "type_name",
    [
        "",
        "NoSuchBuiltin",
        "sample_components.Missing",
        "no_such_package.module.Type",
        "sample_components.Outer.Missing",
        "json.dumps",
    ],
)
def test_unknown_type_names(type_name):
    with pytest.raises(TypeNotFoundError) as raised:
        resolve_type(type_name, "component")

    assert raised.value.type_name == type_name
    assert raised.value.component_id == "component"


def test_qualified_name_round_trips():
    for target in (IntHolder, Outer.Inner, OrderedDict, int):
        assert resolve_type(qualified_name(target)) is target


def test_qualified_name_of_builtins_is_bare():
    assert qualified_name(str) == "str"


def test_module_failing_at_import_is_reported_as_unknown_type(tmp_path, monkeypatch):
    (tmp_path / "failing_at_import.py").write_text(
        'raise RuntimeError("boom")\n\nclass Thing:\n    pass\n'
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    with pytest.raises(TypeNotFoundError) as raised:
        resolve_type("failing_at_import.Thing", "component")

    assert isinstance(raised.value.__cause__, RuntimeError)
