from __future__ import annotations

import pytest

from blockshader.app.models.graph import BlockInstance
from blockshader.app.services.block_library import BlockLibraryService
from blockshader.app.services.dependency_resolver import DependencyResolver
from blockshader.app.services.errors import CycleError, GenerationError


def _resolver() -> DependencyResolver:
    return DependencyResolver(BlockLibraryService())


def _instance(instance_id: str, kind_id: str, **input_values: object) -> BlockInstance:
    return BlockInstance(id=instance_id, kind_id=kind_id, input_values=input_values)


def _assert_sources_first(ordered: list[BlockInstance]) -> None:
    positions = {instance.id: index for index, instance in enumerate(ordered)}
    for instance in ordered:
        for _, connection in instance.connections():
            if connection.source_instance_id in positions:
                assert positions[connection.source_instance_id] < positions[instance.id]


def test_unconnected_instances_keep_input_order() -> None:
    instances = [
        _instance("c", "shape-circle"),
        _instance("a", "color-solid"),
        _instance("b", "pattern-wave"),
    ]

    assert _resolver().order_ids(instances) == ["c", "a", "b"]


def test_dependency_is_moved_before_its_consumer() -> None:
    instances = [
        _instance("mix", "blend-mix", layer1="grad:color", layer2="glow:color"),
        _instance("grad", "color-gradient"),
        _instance("glow", "effect-glow", color="grad:color"),
    ]

    ordered = _resolver().sort(instances)

    assert [instance.id for instance in ordered] == ["grad", "glow", "mix"]
    _assert_sources_first(ordered)


def test_diamond_and_chain_respect_every_edge() -> None:
    instances = [
        _instance("out", "blend-add", layer1="left:result", layer2="right:color"),
        _instance("right", "effect-glow", color="root:color"),
        _instance("left", "blend-multiply", layer1="root:color", layer2="tail:color"),
        _instance("root", "color-rainbow", uv="move:uv"),
        _instance("move", "transform-move"),
        _instance("tail", "color-hsv-adjust", color="root:color"),
    ]

    ordered = _resolver().sort(instances)

    assert len(ordered) == len(instances)
    _assert_sources_first(ordered)


def test_three_block_cycle_is_reported_with_the_closing_block() -> None:
    instances = [
        _instance("a", "effect-glow", color="c:color"),
        _instance("b", "effect-glow", color="a:color"),
        _instance("c", "effect-glow", color="b:color"),
    ]

    with pytest.raises(CycleError) as excinfo:
        _resolver().sort(instances)

    assert excinfo.value.instance_id == "a"
    assert isinstance(excinfo.value, GenerationError)
    assert excinfo.value.diagnostics == ["Circular dependency detected involving block a"]


def test_self_reference_is_a_cycle() -> None:
    with pytest.raises(CycleError) as excinfo:
        _resolver().sort([_instance("loop", "effect-glow", color="loop:color")])

    assert excinfo.value.instance_id == "loop"


def test_cycle_aborts_even_when_other_blocks_are_fine() -> None:
    instances = [
        _instance("ok", "shape-circle"),
        _instance("x", "effect-glow", color="y:color"),
        _instance("y", "effect-glow", color="x:color"),
    ]

    with pytest.raises(CycleError):
        _resolver().sort(instances)


def test_missing_dependency_targets_are_ignored() -> None:
    instances = [_instance("a", "effect-glow", color="ghost:color"), _instance("b", "shape-circle")]

    assert _resolver().order_ids(instances) == ["a", "b"]


def test_unknown_kind_contributes_no_edges_but_can_be_a_source() -> None:
    instances = [
        _instance("consumer", "effect-glow", color="mystery:color"),
        _instance("mystery", "does-not-exist", color="consumer:color"),
    ]

    assert _resolver().order_ids(instances) == ["mystery", "consumer"]


def test_connections_on_undeclared_ports_are_not_edges() -> None:
    instances = [
        _instance("a", "shape-circle", not_a_port="b:shape"),
        _instance("b", "shape-circle"),
    ]

    assert _resolver().build_dependencies(instances) == {"a": [], "b": []}
    assert _resolver().order_ids(instances) == ["a", "b"]


def test_dependencies_are_deduplicated_in_port_order() -> None:
    instance = _instance("m", "blend-mix", layer1="b:color", layer2="a:color", amount="b:color")

    assert _resolver().build_dependencies([instance]) == {"m": ["b", "a"]}


def test_duplicate_ids_emit_first_occurrence_only() -> None:
    first = _instance("dup", "shape-circle")
    second = _instance("dup", "shape-ring")

    ordered = _resolver().sort([first, second])

    assert ordered == [first]


def test_long_chain_does_not_hit_recursion_limit() -> None:
    count = 5_000
    instances = [_instance("n0", "transform-move")]
    instances.extend(_instance(f"n{i}", "transform-move", uv=f"n{i - 1}:uv") for i in range(1, count))
    instances.reverse()

    order = _resolver().order_ids(instances)

    assert order == [f"n{i}" for i in range(count)]
