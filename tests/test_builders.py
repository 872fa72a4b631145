import pytest

from assemblage.builders import load_registry, make_registry
from assemblage.domain import ComponentDefinition, Literal
from assemblage.errors import InvalidDefinitionError
from sample_components import Client, ClientFactory, IntHolder, Outer, Wrapper

DOCUMENT = {
    "components": [
        {
            "id": "a",
            "class": "sample_components.IntHolder",
            "constructorArgs": [{"value": 5, "type": "int"}],
        },
        {
            "id": "b",
            "class": "sample_components.Wrapper",
            "constructorArgs": [{"ref": "a"}],
        },
    ]
}


def test_build_from_document():
    registry = make_registry(DOCUMENT)

    wrapper = registry.get_component("b")

    assert isinstance(wrapper, Wrapper)
    assert wrapper.holder.value == 5


def test_build_from_definitions():
    registry = make_registry(
        [
            ComponentDefinition(
                "label", "sample_components.Outer.Inner", arguments=(Literal("x"),)
            )
        ]
    )

    label = registry.get_component("label")

    assert isinstance(label, Outer.Inner)
    assert label.label == "x"


def test_build_from_definition_mapping():
    definition = ComponentDefinition("n", "int", arguments=(Literal("3", "int"),))

    assert make_registry({"n": definition}).get_component("n") == 3


def test_definition_mapping_keys_must_match_ids():
    definition = ComponentDefinition("n", "int")

    with pytest.raises(InvalidDefinitionError, match="registered under 'm'"):
        make_registry({"m": definition})


def test_singletons_are_registered_before_building():
    holder = IntHolder(11)
    registry = make_registry(DOCUMENT, singletons={"a": holder})

    assert registry.get_component("b").holder is holder


def test_load_registry_merges_documents(tmp_path):
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text(
        "components:\n"
        "  - id: factory\n"
        "    class: sample_components.ClientFactory\n"
        "    constructorArgs:\n"
        "      - value: openai\n"
        "  - id: client\n"
        "    class: sample_components.Client\n"
        "    factoryBean: factory\n"
        "    factoryMethod: create\n"
        "    factoryArgs:\n"
        "      - value: gpt\n"
    )
    user = tmp_path / "user.json"
    user.write_text('{"model": "ignored-by-engine"}')

    registry = load_registry(defaults, user)

    client = registry.get_component("client")
    assert isinstance(client, Client)
    assert client.model == "openai/gpt"
    assert isinstance(registry.get_component("factory"), ClientFactory)


def test_later_documents_replace_components(tmp_path):
    defaults = tmp_path / "defaults.json"
    defaults.write_text(
        '{"components": [{"id": "n", "class": "int", '
        '"constructorArgs": [{"value": "1", "type": "int"}]}]}'
    )
    user = tmp_path / "user.yml"
    user.write_text(
        "components:\n"
        "  - id: n\n"
        "    class: int\n"
        "    constructorArgs: [{value: '2', type: int}]\n"
    )

    assert load_registry(defaults, user).get_component("n") == 2


def test_load_registry_reports_missing_documents(tmp_path):
    with pytest.raises(InvalidDefinitionError, match="nope.yaml"):
        load_registry(tmp_path / "nope.yaml")
