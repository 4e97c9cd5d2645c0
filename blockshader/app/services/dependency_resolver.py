from __future__ import annotations

from collections.abc import Iterator
from enum import Enum

from blockshader.app.models.graph import BlockInstance, ConnectionRef
from blockshader.app.services.block_library import BlockLibraryService
from blockshader.app.services.errors import CycleError


class _VisitState(Enum):
    VISITING = 1
    VISITED = 2


class DependencyResolver:
    """Orders block instances so every instance follows the blocks it reads from.

    Edges come from connection values on the declared input ports of each
    instance whose kind is known. The walk is a depth-first post-order driven
    in caller order, so unconstrained instances keep their relative order and
    the result is reproducible. It runs on an explicit stack; a back edge to an
    instance still on the stack raises :class:`CycleError` naming that
    instance and aborts the whole sort.
    """

    def __init__(self, block_library: BlockLibraryService) -> None:
        self._block_library = block_library

    def build_dependencies(self, instances: list[BlockInstance]) -> dict[str, list[str]]:
        dependencies: dict[str, list[str]] = {}
        for instance in instances:
            if instance.id in dependencies:
                continue
            sources: dict[str, None] = {}
            kind = self._block_library.get_kind(instance.kind_id)
            if kind:
                for port in kind.inputs:
                    value = instance.input_values.get(port.id)
                    if isinstance(value, ConnectionRef):
                        sources.setdefault(value.source_instance_id, None)
            dependencies[instance.id] = list(sources)
        return dependencies

    def sort(self, instances: list[BlockInstance]) -> list[BlockInstance]:
        by_id: dict[str, BlockInstance] = {}
        for instance in instances:
            by_id.setdefault(instance.id, instance)

        dependencies = self.build_dependencies(instances)
        states: dict[str, _VisitState] = {}
        ordered: list[BlockInstance] = []

        for root_id in by_id:
            if root_id in states:
                continue
            states[root_id] = _VisitState.VISITING
            stack: list[tuple[str, Iterator[str]]] = [(root_id, iter(dependencies[root_id]))]
            while stack:
                instance_id, pending = stack[-1]
                for dependency_id in pending:
                    if dependency_id not in by_id:
                        continue
                    state = states.get(dependency_id)
                    if state is _VisitState.VISITED:
                        continue
                    if state is _VisitState.VISITING:
                        raise CycleError(dependency_id)
                    states[dependency_id] = _VisitState.VISITING
                    stack.append((dependency_id, iter(dependencies[dependency_id])))
                    break
                else:
                    stack.pop()
                    states[instance_id] = _VisitState.VISITED
                    ordered.append(by_id[instance_id])

        return ordered

    def order_ids(self, instances: list[BlockInstance]) -> list[str]:
        return [instance.id for instance in self.sort(instances)]
