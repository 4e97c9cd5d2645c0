from __future__ import annotations

import secrets
import string
import time

from blockshader.app.models.block import ValueType
from blockshader.app.models.graph import BlockConnection, BlockInstance, BlockPosition, ConnectionRef
from blockshader.app.services.block_library import BlockLibraryService

_ID_ALPHABET = string.digits + string.ascii_lowercase


def _random_suffix(length: int = 9) -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def generate_block_id() -> str:
    return f"block-{int(time.time() * 1000)}-{_random_suffix()}"


def generate_connection_id() -> str:
    return f"conn-{int(time.time() * 1000)}-{_random_suffix()}"


def create_block_instance(kind_id: str, position: BlockPosition | None = None) -> BlockInstance:
    return BlockInstance(
        id=generate_block_id(),
        kind_id=kind_id,
        position=position or BlockPosition(),
    )


def clone_block(instance: BlockInstance, offset: tuple[float, float] = (20.0, 20.0)) -> BlockInstance:
    return instance.model_copy(
        update={
            "id": generate_block_id(),
            "position": BlockPosition(x=instance.position.x + offset[0], y=instance.position.y + offset[1]),
            "input_values": dict(instance.input_values),
        }
    )


def find_block(instances: list[BlockInstance], block_id: str) -> BlockInstance | None:
    for instance in instances:
        if instance.id == block_id:
            return instance
    return None


def get_dependent_blocks(instances: list[BlockInstance], target_id: str) -> list[BlockInstance]:
    return [
        instance
        for instance in instances
        if any(connection.source_instance_id == target_id for _, connection in instance.connections())
    ]


def remove_block(instances: list[BlockInstance], block_id: str) -> list[BlockInstance]:
    """Drop a block and scrub every connection that pointed at it.

    Returns new instances; the input list and its instances are left as they were.
    """
    remaining: list[BlockInstance] = []
    for instance in instances:
        if instance.id == block_id:
            continue
        input_values = {
            port_id: value
            for port_id, value in instance.input_values.items()
            if not (isinstance(value, ConnectionRef) and value.source_instance_id == block_id)
        }
        remaining.append(instance.model_copy(update={"input_values": input_values}))
    return remaining


def extract_connections(
    instances: list[BlockInstance],
    block_library: BlockLibraryService | None = None,
) -> list[BlockConnection]:
    by_id = {instance.id: instance for instance in reversed(instances)}
    connections: list[BlockConnection] = []
    for instance in instances:
        for port_id, connection in instance.connections():
            connections.append(
                BlockConnection(
                    id=generate_connection_id(),
                    from_instance_id=connection.source_instance_id,
                    from_port_id=connection.source_port_id,
                    to_instance_id=instance.id,
                    to_port_id=port_id,
                    value_type=_source_value_type(connection, by_id, block_library),
                )
            )
    return connections


def _source_value_type(
    connection: ConnectionRef,
    by_id: dict[str, BlockInstance],
    block_library: BlockLibraryService | None,
) -> ValueType | None:
    if block_library is None:
        return None
    source = by_id.get(connection.source_instance_id)
    if not source:
        return None
    kind = block_library.get_kind(source.kind_id)
    if not kind:
        return None
    port = kind.find_output(connection.source_port_id)
    return port.value_type if port else None
