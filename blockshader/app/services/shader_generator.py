from __future__ import annotations

import logging
import re
from decimal import ROUND_HALF_UP, Decimal

from blockshader.app.models.block import (
    ID_PLACEHOLDER,
    NAME_PLACEHOLDER,
    OUTPUT_TYPE_PLACEHOLDER,
    BlockKind,
    PortSpec,
    ValueType,
)
from blockshader.app.models.graph import (
    BlockInstance,
    ConnectionRef,
    DynamicUniform,
    LiteralValue,
    VariableRef,
    VectorValue,
)
from blockshader.app.models.shader import GenerationContext
from blockshader.app.services.block_library import BlockLibraryService
from blockshader.app.services.dependency_resolver import DependencyResolver
from blockshader.app.services.errors import GenerationError

logger = logging.getLogger(__name__)

OUTPUT_SINK = "gl_FragColor"
FRAGMENT_UV_LINE = "vec2 uv = gl_FragCoord.xy / iResolution.xy;"
STANDARD_UNIFORMS: tuple[tuple[str, ValueType], ...] = (
    ("iResolution", ValueType.VEC2),
    ("iTime", ValueType.FLOAT),
)
OUTPUT_CONVERSIONS: dict[ValueType, str] = {
    ValueType.VEC4: "{var}",
    ValueType.VEC3: "vec4({var}, 1.0)",
    ValueType.FLOAT: "vec4(vec3({var}), 1.0)",
    ValueType.VEC2: "vec4({var}, 0.0, 1.0)",
}


def sanitize_instance_id(instance_id: str) -> str:
    return instance_id.replace("-", "_")


def function_name(kind: BlockKind, instance_id: str) -> str:
    stem = re.sub(r"\s+", "", kind.name.lower())
    return f"{stem}_{sanitize_instance_id(instance_id)}"


def result_variable(kind: BlockKind, instance_id: str) -> str:
    stem = re.sub(r"\s+", "_", kind.name.lower())
    return f"{stem}_{sanitize_instance_id(instance_id)}_result"


_HELPER_NAME_PATTERN = re.compile(r"\w*" + re.escape(ID_PLACEHOLDER) + r"\w*")


def declared_identifiers(kind: BlockKind, instance_id: str) -> list[str]:
    """Global GLSL names one instance of ``kind`` introduces into the program."""
    sanitized = sanitize_instance_id(instance_id)
    helpers = {match.replace(ID_PLACEHOLDER, sanitized) for match in _HELPER_NAME_PATTERN.findall(kind.template)}
    return [function_name(kind, instance_id), result_variable(kind, instance_id), *sorted(helpers)]


def find_identifier_collisions(
    instances: list[BlockInstance],
    block_library: BlockLibraryService,
) -> list[str]:
    owners: dict[str, str] = {}
    seen_ids: set[str] = set()
    reported: set[tuple[str, str]] = set()
    problems: list[str] = []
    for instance in instances:
        if instance.id in seen_ids:
            continue
        seen_ids.add(instance.id)
        kind = block_library.get_kind(instance.kind_id)
        if not kind:
            continue
        for identifier in declared_identifiers(kind, instance.id):
            owner = owners.setdefault(identifier, instance.id)
            if owner == instance.id or (owner, instance.id) in reported:
                continue
            reported.add((owner, instance.id))
            problems.append(f"Block ids {owner} and {instance.id} map to the same identifier {identifier}")
    return problems


def format_float(value: float) -> str:
    # Exact ties round away from zero: 0.125 -> 0.13, -0.125 -> -0.13.
    return format(Decimal(float(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP), "f")


def format_vector(values: list[float]) -> str:
    return f"vec{len(values)}({', '.join(format_float(component) for component in values)})"


def format_default(port: PortSpec) -> str:
    default = port.default
    if isinstance(default, str):
        return default
    if isinstance(default, list):
        return format_vector(default)
    if default is None:
        raise GenerationError([f"Input '{port.id}' has no default value"])
    return format_float(default)


class ShaderGeneratorService:
    def __init__(
        self,
        block_library: BlockLibraryService,
        resolver: DependencyResolver | None = None,
    ) -> None:
        self._block_library = block_library
        self._resolver = resolver or DependencyResolver(block_library)

    def generate(
        self,
        instances: list[BlockInstance],
        context: GenerationContext | None = None,
    ) -> str:
        if not instances:
            raise GenerationError(["Nothing to generate: the block graph has no instances."])
        context = context or GenerationContext()

        for instance in instances:
            self._require_kind(instance.kind_id)

        ordered = self._resolver.sort(instances)
        collisions = find_identifier_collisions(instances, self._block_library)
        if collisions:
            raise GenerationError(collisions)

        by_id: dict[str, BlockInstance] = {}
        for instance in instances:
            by_id.setdefault(instance.id, instance)

        definitions = [self.render_definition(instance) for instance in ordered]
        calls = [self.render_call(instance, by_id) for instance in ordered]

        last = ordered[-1]
        last_kind = self._require_kind(last.kind_id)
        conversion = OUTPUT_CONVERSIONS[last_kind.output_type].format(var=result_variable(last_kind, last.id))

        lines = [
            f"precision {context.precision} float;",
            "",
            *self._uniform_lines(context.uniforms),
            "",
        ]
        for definition in definitions:
            lines.extend([definition, ""])
        lines.extend(
            [
                "void main() {",
                f"  {FRAGMENT_UV_LINE}",
                "",
                *[f"  {call}" for call in calls],
                f"  {OUTPUT_SINK} = {conversion};",
                "}",
            ]
        )

        logger.debug("Generated fragment shader from %d block instances", len(ordered))
        return "\n".join(lines) + "\n"

    def render_definition(self, instance: BlockInstance) -> str:
        kind = self._require_kind(instance.kind_id)
        code = kind.template.strip()
        code = code.replace(NAME_PLACEHOLDER, function_name(kind, instance.id))
        code = code.replace(ID_PLACEHOLDER, sanitize_instance_id(instance.id))
        return code.replace(OUTPUT_TYPE_PLACEHOLDER, kind.output_type.value)

    def render_call(self, instance: BlockInstance, by_id: dict[str, BlockInstance]) -> str:
        kind = self._require_kind(instance.kind_id)
        arguments = [self._resolve_argument(instance, port, by_id) for port in kind.inputs]
        return (
            f"{kind.output_type.value} {result_variable(kind, instance.id)} = "
            f"{function_name(kind, instance.id)}({', '.join(arguments)});"
        )

    def _resolve_argument(
        self,
        instance: BlockInstance,
        port: PortSpec,
        by_id: dict[str, BlockInstance],
    ) -> str:
        value = instance.input_values.get(port.id)
        if value is None:
            return format_default(port)
        if isinstance(value, ConnectionRef):
            return self._resolve_connection(instance, value, by_id)
        if isinstance(value, VariableRef):
            return value.name
        if isinstance(value, LiteralValue):
            return format_float(value.value)
        if isinstance(value, VectorValue):
            return format_vector(value.values)
        raise GenerationError([f"Unsupported value for input '{port.id}' on block {instance.id}: {value!r}"])

    def _resolve_connection(
        self,
        instance: BlockInstance,
        connection: ConnectionRef,
        by_id: dict[str, BlockInstance],
    ) -> str:
        source = by_id.get(connection.source_instance_id)
        if not source:
            raise GenerationError(
                [f"Block {instance.id} references non-existent block {connection.source_instance_id}"]
            )
        source_kind = self._require_kind(source.kind_id)
        if not source_kind.find_output(connection.source_port_id):
            raise GenerationError(
                [
                    f"Block {instance.id} references non-existent output {connection.source_port_id} "
                    f"on block {connection.source_instance_id}"
                ]
            )
        return result_variable(source_kind, source.id)

    def _require_kind(self, kind_id: str) -> BlockKind:
        kind = self._block_library.get_kind(kind_id)
        if not kind:
            raise GenerationError([f"Unknown block kind: {kind_id}"])
        return kind

    @staticmethod
    def _uniform_lines(uniforms: list[DynamicUniform]) -> list[str]:
        lines = [f"uniform {value_type.value} {name};" for name, value_type in STANDARD_UNIFORMS]
        declared = {name for name, _ in STANDARD_UNIFORMS}
        for uniform in uniforms:
            if uniform.name in declared:
                continue
            declared.add(uniform.name)
            lines.append(f"uniform {uniform.type.value} {uniform.name};")
        return lines
