from __future__ import annotations

from collections import defaultdict

from blockshader.app.models.block import (
    NAME_PLACEHOLDER,
    UV_VARIABLE,
    BlockCategory,
    BlockKind,
    PortSpec,
    ValueType,
)
from blockshader.app.services import block_templates as templates


class BlockLibraryService:
    """Read-only catalog of the block kinds a graph may instantiate."""

    def __init__(self, kinds: list[BlockKind] | None = None) -> None:
        loaded = kinds if kinds is not None else self._load_builtin_blocks()
        self._kinds: dict[str, BlockKind] = {}
        for kind in loaded:
            if kind.id in self._kinds:
                raise ValueError(f"Duplicate block kind id '{kind.id}'")
            if NAME_PLACEHOLDER not in kind.template:
                raise ValueError(f"Template for block kind '{kind.id}' does not declare {NAME_PLACEHOLDER}")
            self._kinds[kind.id] = kind

    def get_kind(self, kind_id: str) -> BlockKind | None:
        return self._kinds.get(kind_id)

    def list_kinds(self, category: BlockCategory | str | None = None) -> list[BlockKind]:
        if category:
            return self.list_by_category(category)
        return list(self._kinds.values())

    def list_by_category(self, category: BlockCategory | str) -> list[BlockKind]:
        return [kind for kind in self._kinds.values() if kind.category == category]

    def list_categories(self) -> list[BlockCategory]:
        seen: dict[BlockCategory, None] = {}
        for kind in self._kinds.values():
            seen.setdefault(kind.category, None)
        return list(seen)

    def category_counts(self) -> dict[str, int]:
        counters: dict[str, int] = defaultdict(int)
        for kind in self._kinds.values():
            counters[kind.category.value] += 1
        return dict(sorted(counters.items(), key=lambda kv: kv[0]))

    @staticmethod
    def _uv_port(port_id: str = "uv", label: str = "UV") -> PortSpec:
        return PortSpec(id=port_id, label=label, value_type=ValueType.VEC2, default=UV_VARIABLE)

    @staticmethod
    def _float(port_id: str, label: str, default: float) -> PortSpec:
        return PortSpec(id=port_id, label=label, value_type=ValueType.FLOAT, default=default)

    @staticmethod
    def _vec(port_id: str, label: str, default: list[float]) -> PortSpec:
        value_type = ValueType(f"vec{len(default)}")
        return PortSpec(id=port_id, label=label, value_type=value_type, default=default)

    @staticmethod
    def _output(port_id: str, label: str, value_type: ValueType) -> PortSpec:
        return PortSpec(id=port_id, label=label, value_type=value_type)

    def _load_builtin_blocks(self) -> list[BlockKind]:
        return [
            BlockKind(
                id="shape-circle",
                name="Circle",
                category=BlockCategory.SHAPE,
                description="Creates a circular shape with soft edges",
                icon="⭕",
                template=templates.CIRCLE_TEMPLATE,
                inputs=[
                    self._uv_port(),
                    self._vec("center", "Center", [0.5, 0.5]),
                    self._float("radius", "Radius", 0.3),
                    self._float("softness", "Softness", 0.01),
                ],
                outputs=[self._output("shape", "Shape", ValueType.FLOAT)],
            ),
            BlockKind(
                id="shape-rectangle",
                name="Rectangle",
                category=BlockCategory.SHAPE,
                description="Creates a rectangular shape with rounded corners",
                icon="⬜",
                template=templates.RECTANGLE_TEMPLATE,
                inputs=[
                    self._uv_port(),
                    self._vec("center", "Center", [0.5, 0.5]),
                    self._vec("size", "Size", [0.5, 0.3]),
                    self._float("cornerRadius", "Corner Radius", 0.05),
                ],
                outputs=[self._output("shape", "Shape", ValueType.FLOAT)],
            ),
            BlockKind(
                id="shape-ring",
                name="Ring",
                category=BlockCategory.SHAPE,
                description="Creates a ring/donut shape",
                icon="⭕",
                template=templates.RING_TEMPLATE,
                inputs=[
                    self._uv_port(),
                    self._vec("center", "Center", [0.5, 0.5]),
                    self._float("innerRadius", "Inner Radius", 0.2),
                    self._float("outerRadius", "Outer Radius", 0.3),
                    self._float("softness", "Softness", 0.01),
                ],
                outputs=[self._output("shape", "Shape", ValueType.FLOAT)],
            ),
            BlockKind(
                id="shape-star",
                name="Star",
                category=BlockCategory.SHAPE,
                description="Creates a star shape",
                icon="⭐",
                template=templates.STAR_TEMPLATE,
                inputs=[
                    self._uv_port(),
                    self._vec("center", "Center", [0.5, 0.5]),
                    self._float("points", "Points", 5.0),
                    self._float("size", "Size", 0.3),
                    self._float("softness", "Softness", 0.01),
                ],
                outputs=[self._output("shape", "Shape", ValueType.FLOAT)],
            ),
            BlockKind(
                id="pattern-wave",
                name="Wave",
                category=BlockCategory.PATTERN,
                description="Creates animated wave distortion",
                icon="🌊",
                template=templates.WAVE_TEMPLATE,
                inputs=[
                    self._uv_port(),
                    self._float("frequency", "Frequency", 10.0),
                    self._float("amplitude", "Amplitude", 0.1),
                    self._float("speed", "Speed", 1.0),
                    self._float("direction", "Direction", 0.0),
                ],
                outputs=[self._output("wave", "Wave", ValueType.FLOAT)],
            ),
            BlockKind(
                id="pattern-grid",
                name="Grid",
                category=BlockCategory.PATTERN,
                description="Creates a grid pattern",
                icon="⊞",
                template=templates.GRID_TEMPLATE,
                inputs=[
                    self._uv_port(),
                    self._float("cellSize", "Cell Size", 0.1),
                    self._float("lineWidth", "Line Width", 1.0),
                ],
                outputs=[self._output("grid", "Grid", ValueType.FLOAT)],
            ),
            BlockKind(
                id="pattern-checkerboard",
                name="Checkerboard",
                category=BlockCategory.PATTERN,
                description="Classic checkerboard pattern",
                icon="▦",
                template=templates.CHECKERBOARD_TEMPLATE,
                inputs=[
                    self._uv_port(),
                    self._float("scale", "Scale", 8.0),
                    self._float("rotation", "Rotation", 0.0),
                ],
                outputs=[self._output("pattern", "Pattern", ValueType.FLOAT)],
            ),
            BlockKind(
                id="color-solid",
                name="Solid Color",
                category=BlockCategory.COLOR,
                description="Outputs a solid color with alpha",
                icon="🎨",
                template=templates.SOLID_COLOR_TEMPLATE,
                inputs=[
                    self._vec("color", "Color", [1.0, 0.5, 0.0]),
                    self._float("alpha", "Alpha", 1.0),
                ],
                outputs=[self._output("color", "Color", ValueType.VEC4)],
            ),
            BlockKind(
                id="color-gradient",
                name="Gradient",
                category=BlockCategory.COLOR,
                description="Linear gradient between two colors",
                icon="🌈",
                template=templates.GRADIENT_TEMPLATE,
                inputs=[
                    self._uv_port(),
                    self._vec("color1", "Color 1", [0.0, 0.5, 1.0]),
                    self._vec("color2", "Color 2", [1.0, 0.0, 0.5]),
                    self._float("angle", "Angle", 0.0),
                    self._float("position", "Position", 0.0),
                ],
                outputs=[self._output("color", "Color", ValueType.VEC3)],
            ),
            BlockKind(
                id="color-rainbow",
                name="Rainbow",
                category=BlockCategory.COLOR,
                description="Animated rainbow colors",
                icon="🌈",
                template=templates.RAINBOW_TEMPLATE,
                inputs=[
                    self._uv_port(),
                    self._float("speed", "Speed", 0.5),
                    self._float("saturation", "Saturation", 1.0),
                ],
                outputs=[self._output("color", "Color", ValueType.VEC3)],
            ),
            BlockKind(
                id="color-hsv-adjust",
                name="HSV Adjust",
                category=BlockCategory.COLOR,
                description="Adjust hue, saturation, and value",
                icon="🎨",
                template=templates.HSV_ADJUST_TEMPLATE,
                inputs=[
                    self._vec("color", "Color", [1.0, 1.0, 1.0]),
                    self._float("hueShift", "Hue Shift", 0.0),
                    self._float("saturation", "Saturation", 1.0),
                    self._float("brightness", "Brightness", 1.0),
                ],
                outputs=[self._output("color", "Color", ValueType.VEC3)],
            ),
            BlockKind(
                id="transform-move",
                name="Move",
                category=BlockCategory.TRANSFORM,
                description="Translates UV coordinates",
                icon="↔️",
                template=templates.MOVE_TEMPLATE,
                inputs=[
                    self._uv_port(),
                    self._float("xOffset", "X Offset", 0.0),
                    self._float("yOffset", "Y Offset", 0.0),
                ],
                outputs=[self._output("uv", "UV", ValueType.VEC2)],
            ),
            BlockKind(
                id="transform-rotate",
                name="Rotate",
                category=BlockCategory.TRANSFORM,
                description="Rotates UV coordinates around a center point",
                icon="🔄",
                template=templates.ROTATE_TEMPLATE,
                inputs=[
                    self._uv_port(),
                    self._vec("center", "Center", [0.5, 0.5]),
                    self._float("angle", "Angle", 0.0),
                ],
                outputs=[self._output("uv", "UV", ValueType.VEC2)],
            ),
            BlockKind(
                id="transform-scale",
                name="Scale",
                category=BlockCategory.TRANSFORM,
                description="Scales UV coordinates",
                icon="⤢",
                template=templates.SCALE_TEMPLATE,
                inputs=[
                    self._uv_port(),
                    self._vec("center", "Center", [0.5, 0.5]),
                    self._float("scaleX", "Scale X", 1.0),
                    self._float("scaleY", "Scale Y", 1.0),
                ],
                outputs=[self._output("uv", "UV", ValueType.VEC2)],
            ),
            BlockKind(
                id="transform-distort",
                name="Distort",
                category=BlockCategory.TRANSFORM,
                description="Wave-based distortion",
                icon="〰️",
                template=templates.DISTORT_TEMPLATE,
                inputs=[
                    self._uv_port(),
                    self._float("strength", "Strength", 0.1),
                    self._float("frequency", "Frequency", 5.0),
                ],
                outputs=[self._output("uv", "UV", ValueType.VEC2)],
            ),
            BlockKind(
                id="blend-mix",
                name="Mix",
                category=BlockCategory.BLEND,
                description="Blends two values with adjustable amount",
                icon="⚖️",
                template=templates.MIX_TEMPLATE,
                inputs=[
                    self._vec("layer1", "Layer 1", [0.0, 0.0, 0.0]),
                    self._vec("layer2", "Layer 2", [1.0, 1.0, 1.0]),
                    self._float("amount", "Amount", 0.5),
                ],
                outputs=[self._output("result", "Result", ValueType.VEC3)],
            ),
            BlockKind(
                id="blend-multiply",
                name="Multiply",
                category=BlockCategory.BLEND,
                description="Multiplies two values",
                icon="✖️",
                template=templates.MULTIPLY_TEMPLATE,
                inputs=[
                    self._vec("layer1", "Layer 1", [1.0, 1.0, 1.0]),
                    self._vec("layer2", "Layer 2", [1.0, 1.0, 1.0]),
                ],
                outputs=[self._output("result", "Result", ValueType.VEC3)],
            ),
            BlockKind(
                id="blend-add",
                name="Add",
                category=BlockCategory.BLEND,
                description="Adds two values together",
                icon="➕",
                template=templates.ADD_TEMPLATE,
                inputs=[
                    self._vec("layer1", "Layer 1", [0.0, 0.0, 0.0]),
                    self._vec("layer2", "Layer 2", [0.0, 0.0, 0.0]),
                ],
                outputs=[self._output("result", "Result", ValueType.VEC3)],
            ),
            BlockKind(
                id="blend-overlay",
                name="Overlay",
                category=BlockCategory.BLEND,
                description="Overlay blend mode",
                icon="🔀",
                template=templates.OVERLAY_TEMPLATE,
                inputs=[
                    self._vec("base", "Base", [0.5, 0.5, 0.5]),
                    self._vec("blend", "Blend", [0.5, 0.5, 0.5]),
                ],
                outputs=[self._output("result", "Result", ValueType.VEC3)],
            ),
            BlockKind(
                id="effect-glow",
                name="Glow",
                category=BlockCategory.EFFECT,
                description="Adds glow effect to color",
                icon="✨",
                template=templates.GLOW_TEMPLATE,
                inputs=[
                    self._vec("color", "Color", [1.0, 1.0, 1.0]),
                    self._float("intensity", "Intensity", 1.0),
                    self._float("size", "Size", 0.5),
                ],
                outputs=[self._output("color", "Color", ValueType.VEC3)],
            ),
            BlockKind(
                id="effect-noise",
                name="Noise",
                category=BlockCategory.EFFECT,
                description="Random noise texture",
                icon="📺",
                template=templates.NOISE_TEMPLATE,
                inputs=[
                    self._uv_port("p", "Position"),
                    self._float("scale", "Scale", 10.0),
                    self._float("speed", "Speed", 0.1),
                ],
                outputs=[self._output("noise", "Noise", ValueType.FLOAT)],
            ),
            BlockKind(
                id="effect-ripple",
                name="Ripple",
                category=BlockCategory.EFFECT,
                description="Concentric ripple effect",
                icon="〰️",
                template=templates.RIPPLE_TEMPLATE,
                inputs=[
                    self._uv_port(),
                    self._vec("center", "Center", [0.5, 0.5]),
                    self._float("frequency", "Frequency", 20.0),
                    self._float("amplitude", "Amplitude", 0.1),
                    self._float("speed", "Speed", 2.0),
                ],
                outputs=[self._output("ripple", "Ripple", ValueType.FLOAT)],
            ),
        ]
