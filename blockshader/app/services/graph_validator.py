from __future__ import annotations

from blockshader.app.models.graph import BlockInstance, ConnectionRef
from blockshader.app.services.block_library import BlockLibraryService
from blockshader.app.services.dependency_resolver import DependencyResolver
from blockshader.app.services.errors import CycleError
from blockshader.app.services.shader_generator import find_identifier_collisions


class GraphValidatorService:
    def __init__(
        self,
        block_library: BlockLibraryService,
        resolver: DependencyResolver | None = None,
    ) -> None:
        self._block_library = block_library
        self._resolver = resolver or DependencyResolver(block_library)

    def validate(self, instances: list[BlockInstance]) -> list[str]:
        problems: list[str] = []

        try:
            self._resolver.sort(instances)
        except CycleError as err:
            problems.extend(err.diagnostics)

        by_id: dict[str, BlockInstance] = {}
        for instance in instances:
            if instance.id in by_id:
                problems.append(f"Duplicate block id: {instance.id}")
                continue
            by_id[instance.id] = instance

        for instance in instances:
            kind = self._block_library.get_kind(instance.kind_id)
            if not kind:
                problems.append(f"Invalid block type: {instance.kind_id}")
                continue

            for port in kind.inputs:
                value = instance.input_values.get(port.id)
                if isinstance(value, ConnectionRef):
                    problems.extend(self._validate_connection(instance, value, by_id))

        problems.extend(find_identifier_collisions(instances, self._block_library))
        return problems

    def _validate_connection(
        self,
        instance: BlockInstance,
        connection: ConnectionRef,
        by_id: dict[str, BlockInstance],
    ) -> list[str]:
        source = by_id.get(connection.source_instance_id)
        if not source:
            return [f"Block {instance.id} references non-existent block {connection.source_instance_id}"]

        source_kind = self._block_library.get_kind(source.kind_id)
        if not source_kind or not source_kind.find_output(connection.source_port_id):
            return [
                f"Block {instance.id} references non-existent output {connection.source_port_id} "
                f"on block {connection.source_instance_id}"
            ]
        return []
