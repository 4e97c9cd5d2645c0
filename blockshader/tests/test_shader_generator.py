from __future__ import annotations

import pytest

from blockshader.app.models.block import BlockCategory, BlockKind, PortSpec, ValueType
from blockshader.app.models.graph import BlockInstance, DynamicUniform
from blockshader.app.models.shader import GenerationContext
from blockshader.app.services.block_library import BlockLibraryService
from blockshader.app.services.errors import CycleError, GenerationError
from blockshader.app.services.shader_generator import (
    ShaderGeneratorService,
    declared_identifiers,
    format_float,
    format_vector,
    function_name,
    result_variable,
)

CIRCLE_PROGRAM = """precision mediump float;

uniform vec2 iResolution;
uniform float iTime;

// Circle shape
float circle_a(vec2 uv, vec2 center, float radius, float softness) {
  float d = length(uv - center);
  return 1.0 - smoothstep(radius - softness, radius + softness, d);
}

void main() {
  vec2 uv = gl_FragCoord.xy / iResolution.xy;

  float circle_a_result = circle_a(uv, vec2(0.50, 0.50), 0.30, 0.01);
  gl_FragColor = vec4(vec3(circle_a_result), 1.0);
}
"""


def _generator(library: BlockLibraryService | None = None) -> ShaderGeneratorService:
    return ShaderGeneratorService(library or BlockLibraryService())


def _instance(instance_id: str, kind_id: str, **input_values: object) -> BlockInstance:
    return BlockInstance(id=instance_id, kind_id=kind_id, input_values=input_values)


def _custom_library() -> BlockLibraryService:
    return BlockLibraryService(
        kinds=[
            BlockKind(
                id="test-tint",
                name="Tint Color",
                category=BlockCategory.COLOR,
                template="vec3 {{name}}(float strength, vec3 tint) {\n  return tint * strength;\n}",
                inputs=[
                    PortSpec(id="strength", label="Strength", value_type=ValueType.FLOAT, default=2.5),
                    PortSpec(id="tint", label="Tint", value_type=ValueType.VEC3, default=[1, 0, 0]),
                ],
                outputs=[PortSpec(id="color", label="Color", value_type=ValueType.VEC3)],
            ),
            BlockKind(
                id="test-coords",
                name="Coords",
                category=BlockCategory.TRANSFORM,
                template="vec2 {{name}}(vec2 p) {\n  return p;\n}",
                inputs=[PortSpec(id="p", label="P", value_type=ValueType.VEC2, default="uv")],
                outputs=[PortSpec(id="uv", label="UV", value_type=ValueType.VEC2)],
            ),
        ]
    )


def test_single_circle_program_matches_expected_text() -> None:
    assert _generator().generate([_instance("a", "shape-circle")]) == CIRCLE_PROGRAM


def test_empty_graph_has_nothing_to_generate() -> None:
    with pytest.raises(GenerationError) as excinfo:
        _generator().generate([])

    assert "nothing to generate" in str(excinfo.value).lower()


def test_unknown_kind_aborts_generation() -> None:
    instances = [_instance("a", "shape-circle"), _instance("b", "shape-hexagon")]

    with pytest.raises(GenerationError) as excinfo:
        _generator().generate(instances)

    assert excinfo.value.diagnostics == ["Unknown block kind: shape-hexagon"]


def test_cycle_propagates_resolver_error_unchanged() -> None:
    instances = [
        _instance("a", "effect-glow", color="c:color"),
        _instance("b", "effect-glow", color="a:color"),
        _instance("c", "effect-glow", color="b:color"),
    ]

    with pytest.raises(CycleError) as excinfo:
        _generator().generate(instances)

    assert str(excinfo.value) == "Circular dependency detected involving block a"


def test_generation_is_deterministic() -> None:
    instances = [
        _instance("mix-1", "blend-mix", layer1="grad-1:color", layer2="glow-1:color", amount=0.25),
        _instance("grad-1", "color-gradient", angle=45),
        _instance("glow-1", "effect-glow", color="grad-1:color"),
    ]
    generator = _generator()

    assert generator.generate(instances) == generator.generate(instances)


def test_scalar_and_tuple_defaults_are_formatted_with_two_decimals() -> None:
    source = _generator(_custom_library()).generate([_instance("t", "test-tint")])

    assert "vec3 tint_color_t_result = tintcolor_t(2.50, vec3(1.00, 0.00, 0.00));" in source


def test_uv_default_is_emitted_as_bare_identifier() -> None:
    source = _generator(_custom_library()).generate([_instance("c", "test-coords")])

    assert "vec2 coords_c_result = coords_c(uv);" in source
    assert "gl_FragColor = vec4(coords_c_result, 0.0, 1.0);" in source


def test_supplied_literals_override_defaults() -> None:
    source = _generator().generate([_instance("a", "shape-circle", center=[0.25, 0.75], radius=0.125)])

    assert "circle_a(uv, vec2(0.25, 0.75), 0.13, 0.01);" in source


def test_vec4_output_is_written_without_wrapping() -> None:
    source = _generator().generate([_instance("block-1", "color-solid")])

    assert "vec4 solid_color_block_1_result = solidcolor_block_1(vec3(1.00, 0.50, 0.00), 1.00);" in source
    assert "  gl_FragColor = solid_color_block_1_result;\n}" in source


def test_vec3_output_gets_opaque_alpha() -> None:
    source = _generator().generate([_instance("g", "color-gradient")])

    assert "gl_FragColor = vec4(gradient_g_result, 1.0);" in source


def test_connection_uses_source_result_variable_declared_earlier() -> None:
    instances = [
        _instance("glow", "effect-glow", color="grad:color"),
        _instance("grad", "color-gradient"),
    ]

    source = _generator().generate(instances)

    declaration = source.index("vec3 gradient_grad_result = gradient_grad(")
    usage = source.index("vec3 glow_glow_result = glow_glow(gradient_grad_result, 1.00, 0.50);")
    assert declaration < usage
    assert source.index("vec3 gradient_grad(") < source.index("vec3 glow_glow(")
    assert "gl_FragColor = vec4(glow_glow_result, 1.0);" in source


def test_free_variable_is_emitted_verbatim_and_uniform_declared() -> None:
    context = GenerationContext(uniforms=[DynamicUniform(name="uRadius", type=ValueType.FLOAT, value=0.4)])

    source = _generator().generate([_instance("a", "shape-circle", radius="uRadius")], context)

    assert "uniform float uRadius;" in source
    assert "circle_a(uv, vec2(0.50, 0.50), uRadius, 0.01);" in source


def test_dynamic_uniforms_skip_standard_and_duplicate_names() -> None:
    context = GenerationContext(
        uniforms=[
            DynamicUniform(name="iTime"),
            DynamicUniform(name="uTint", type=ValueType.VEC3, value=[1.0, 0.0, 0.0]),
            DynamicUniform(name="uTint", type=ValueType.VEC3),
        ]
    )

    source = _generator().generate([_instance("a", "shape-circle")], context)

    assert source.count("uniform float iTime;") == 1
    assert source.count("uniform vec3 uTint;") == 1


def test_generic_template_is_monomorphized_per_instance() -> None:
    instances = [_instance("m-1", "blend-mix"), _instance("m-2", "blend-mix", layer1="m-1:result")]

    source = _generator().generate(instances)

    assert "vec3 mix_m_1(vec3 layer1, vec3 layer2, float amount) {" in source
    assert "vec3 mix_m_2(vec3 layer1, vec3 layer2, float amount) {" in source
    assert "vec3 mix_m_2_result = mix_m_2(mix_m_1_result, vec3(1.00, 1.00, 1.00), 0.50);" in source
    assert "{{" not in source


def test_helper_functions_get_instance_suffix() -> None:
    source = _generator().generate([_instance("h-1", "color-hsv-adjust")])

    assert "vec3 rgb2hsv_h_1(vec3 c) {" in source
    assert "vec3 hsv2rgb_h_1(vec3 c) {" in source
    assert "vec3 hsvadjust_h_1(vec3 color, float hueShift, float saturation, float brightness) {" in source
    assert "vec3 hsv_adjust_h_1_result = hsvadjust_h_1(vec3(1.00, 1.00, 1.00), 0.00, 1.00, 1.00);" in source


def test_dangling_connection_is_refused() -> None:
    with pytest.raises(GenerationError) as excinfo:
        _generator().generate([_instance("A", "effect-glow", color="B:shape")])

    assert excinfo.value.diagnostics == ["Block A references non-existent block B"]


def test_dangling_output_port_is_refused() -> None:
    instances = [_instance("src", "shape-circle"), _instance("dst", "effect-glow", color="src:nope")]

    with pytest.raises(GenerationError) as excinfo:
        _generator().generate(instances)

    assert excinfo.value.diagnostics == ["Block dst references non-existent output nope on block src"]


def test_precision_comes_from_context() -> None:
    source = _generator().generate([_instance("a", "shape-circle")], GenerationContext(precision="highp"))

    assert source.startswith("precision highp float;\n")


def test_last_sorted_instance_drives_output_conversion() -> None:
    instances = [
        _instance("noise", "effect-noise", p="move:uv"),
        _instance("move", "transform-move", xOffset=0.1),
    ]

    source = _generator().generate(instances)

    assert source.rstrip().endswith("gl_FragColor = vec4(vec3(noise_noise_result), 1.0);\n}")


def test_name_derivation_is_shared_between_definition_and_call() -> None:
    kind = BlockLibraryService().get_kind("color-hsv-adjust")
    assert kind is not None

    assert function_name(kind, "block-12-ab") == "hsvadjust_block_12_ab"
    assert result_variable(kind, "block-12-ab") == "hsv_adjust_block_12_ab_result"


def test_format_vector_handles_all_widths() -> None:
    assert format_vector([1, 2]) == "vec2(1.00, 2.00)"
    assert format_vector([0.5, 0.25, 0.125, 1]) == "vec4(0.50, 0.25, 0.13, 1.00)"


def test_format_float_rounds_ties_away_from_zero() -> None:
    assert format_float(0.125) == "0.13"
    assert format_float(0.625) == "0.63"
    assert format_float(-0.125) == "-0.13"
    assert format_float(1.005) == "1.00"
    assert format_float(3) == "3.00"


def test_tied_literals_in_calls_round_up() -> None:
    source = _generator().generate([_instance("a", "shape-circle", radius=0.125, softness=0.625)])

    assert "circle_a(uv, vec2(0.50, 0.50), 0.13, 0.63);" in source


def test_ids_mapping_to_the_same_function_name_are_refused() -> None:
    instances = [_instance("a-b", "shape-circle"), _instance("a_b", "shape-circle")]

    with pytest.raises(GenerationError) as excinfo:
        _generator().generate(instances)

    assert excinfo.value.diagnostics == ["Block ids a-b and a_b map to the same identifier circle_a_b"]


def test_function_name_clashing_with_result_variable_is_refused() -> None:
    instances = [_instance("x", "shape-circle"), _instance("x_result", "shape-circle")]

    with pytest.raises(GenerationError) as excinfo:
        _generator().generate(instances)

    assert excinfo.value.diagnostics == ["Block ids x and x_result map to the same identifier circle_x_result"]


def test_declared_identifiers_include_helper_functions() -> None:
    kind = BlockLibraryService().get_kind("color-hsv-adjust")
    assert kind is not None

    assert declared_identifiers(kind, "h-1") == [
        "hsvadjust_h_1",
        "hsv_adjust_h_1_result",
        "hsv2rgb_h_1",
        "rgb2hsv_h_1",
    ]


def test_distinct_kinds_with_similar_ids_do_not_clash() -> None:
    source = _generator().generate([_instance("a-b", "shape-circle"), _instance("a_b", "shape-ring")])

    assert source.count("float circle_a_b(") == 1
    assert source.count("float ring_a_b(") == 1
