from __future__ import annotations

# Shapes

CIRCLE_TEMPLATE = """
// Circle shape
float {{name}}(vec2 uv, vec2 center, float radius, float softness) {
  float d = length(uv - center);
  return 1.0 - smoothstep(radius - softness, radius + softness, d);
}
"""

RECTANGLE_TEMPLATE = """
// Rectangle shape
float {{name}}(vec2 uv, vec2 center, vec2 size, float cornerRadius) {
  vec2 d = abs(uv - center) - size * 0.5;
  float dist = length(max(d, 0.0)) + min(max(d.x, d.y), 0.0) - cornerRadius;
  return 1.0 - smoothstep(-0.01, 0.01, dist);
}
"""

RING_TEMPLATE = """
// Ring shape
float {{name}}(vec2 uv, vec2 center, float innerRadius, float outerRadius, float softness) {
  float d = length(uv - center);
  float outer = 1.0 - smoothstep(outerRadius - softness, outerRadius + softness, d);
  float inner = smoothstep(innerRadius - softness, innerRadius + softness, d);
  return outer * inner;
}
"""

STAR_TEMPLATE = """
// Star shape
float {{name}}(vec2 uv, vec2 center, float points, float size, float softness) {
  vec2 p = uv - center;
  float a = atan(p.y, p.x);
  float r = length(p);
  float m = 3.14159265359 / max(points, 1.0);
  float d = cos(floor(0.5 + a / (2.0 * m)) * 2.0 * m - a) * r;
  return 1.0 - smoothstep(size - softness, size + softness, d);
}
"""

# Patterns

WAVE_TEMPLATE = """
// Wave pattern
float {{name}}(vec2 uv, float frequency, float amplitude, float speed, float direction) {
  float angle = direction * 3.14159265359 / 180.0;
  vec2 dir = vec2(cos(angle), sin(angle));
  float d = dot(uv, dir);
  return sin(d * frequency + iTime * speed) * amplitude;
}
"""

GRID_TEMPLATE = """
// Grid pattern
float {{name}}(vec2 uv, float cellSize, float lineWidth) {
  vec2 cell = abs(fract(uv / cellSize - 0.5) - 0.5) * cellSize * 100.0;
  float line = min(cell.x, cell.y);
  return 1.0 - min(line * lineWidth, 1.0);
}
"""

CHECKERBOARD_TEMPLATE = """
// Checkerboard pattern
float {{name}}(vec2 uv, float scale, float rotation) {
  float angle = rotation * 3.14159265359 / 180.0;
  mat2 rot = mat2(cos(angle), -sin(angle), sin(angle), cos(angle));
  vec2 rotUV = rot * (uv - 0.5) + 0.5;
  vec2 checker = floor(rotUV * scale);
  return mod(checker.x + checker.y, 2.0);
}
"""

# Colors

SOLID_COLOR_TEMPLATE = """
// Solid color
vec4 {{name}}(vec3 color, float alpha) {
  return vec4(color, alpha);
}
"""

GRADIENT_TEMPLATE = """
// Linear gradient
vec3 {{name}}(vec2 uv, vec3 color1, vec3 color2, float angle, float position) {
  float angleRad = angle * 3.14159265359 / 180.0;
  vec2 dir = vec2(cos(angleRad), sin(angleRad));
  float d = dot(uv - vec2(0.5), dir) + 0.5 + position;
  return mix(color1, color2, clamp(d, 0.0, 1.0));
}
"""

RAINBOW_TEMPLATE = """
// Rainbow color
vec3 {{name}}(vec2 uv, float speed, float saturation) {
  float hue = fract(length(uv - 0.5) + iTime * speed);
  vec3 c = abs(hue * 6.0 - vec3(3.0, 2.0, 4.0)) - 1.0;
  return clamp(c, 0.0, 1.0) * saturation + (1.0 - saturation);
}
"""

HSV_ADJUST_TEMPLATE = """
// HSV adjustment
vec3 rgb2hsv_{{id}}(vec3 c) {
  vec4 K = vec4(0.0, -1.0 / 3.0, 2.0 / 3.0, -1.0);
  vec4 p = mix(vec4(c.bg, K.wz), vec4(c.gb, K.xy), step(c.b, c.g));
  vec4 q = mix(vec4(p.xyw, c.r), vec4(c.r, p.yzx), step(p.x, c.r));
  float d = q.x - min(q.w, q.y);
  float e = 1.0e-10;
  return vec3(abs(q.z + (q.w - q.y) / (6.0 * d + e)), d / (q.x + e), q.x);
}

vec3 hsv2rgb_{{id}}(vec3 c) {
  vec4 K = vec4(1.0, 2.0 / 3.0, 1.0 / 3.0, 3.0);
  vec3 p = abs(fract(c.xxx + K.xyz) * 6.0 - K.www);
  return c.z * mix(K.xxx, clamp(p - K.xxx, 0.0, 1.0), c.y);
}

vec3 {{name}}(vec3 color, float hueShift, float saturation, float brightness) {
  vec3 hsv = rgb2hsv_{{id}}(color);
  hsv.x = fract(hsv.x + hueShift);
  hsv.y = clamp(hsv.y * saturation, 0.0, 1.0);
  hsv.z = clamp(hsv.z * brightness, 0.0, 1.0);
  return hsv2rgb_{{id}}(hsv);
}
"""

# Transforms

MOVE_TEMPLATE = """
// Move/translate coordinates
vec2 {{name}}(vec2 uv, float xOffset, float yOffset) {
  return uv - vec2(xOffset, yOffset);
}
"""

ROTATE_TEMPLATE = """
// Rotate coordinates
vec2 {{name}}(vec2 uv, vec2 center, float angle) {
  float angleRad = angle * 3.14159265359 / 180.0;
  mat2 rot = mat2(cos(angleRad), -sin(angleRad), sin(angleRad), cos(angleRad));
  return rot * (uv - center) + center;
}
"""

SCALE_TEMPLATE = """
// Scale coordinates
vec2 {{name}}(vec2 uv, vec2 center, float scaleX, float scaleY) {
  vec2 p = uv - center;
  p /= vec2(scaleX, scaleY);
  return p + center;
}
"""

DISTORT_TEMPLATE = """
// Distort coordinates
vec2 {{name}}(vec2 uv, float strength, float frequency) {
  vec2 distortion = vec2(
    sin(uv.y * frequency + iTime) * strength,
    cos(uv.x * frequency + iTime) * strength
  );
  return uv + distortion;
}
"""

# Blending

MIX_TEMPLATE = """
// Mix/blend two values
{{outputType}} {{name}}({{outputType}} layer1, {{outputType}} layer2, float amount) {
  return mix(layer1, layer2, amount);
}
"""

MULTIPLY_TEMPLATE = """
// Multiply two values
{{outputType}} {{name}}({{outputType}} layer1, {{outputType}} layer2) {
  return layer1 * layer2;
}
"""

ADD_TEMPLATE = """
// Add two values
{{outputType}} {{name}}({{outputType}} layer1, {{outputType}} layer2) {
  return layer1 + layer2;
}
"""

OVERLAY_TEMPLATE = """
// Overlay blend mode
vec3 {{name}}(vec3 base, vec3 blend) {
  return mix(
    2.0 * base * blend,
    1.0 - 2.0 * (1.0 - base) * (1.0 - blend),
    step(0.5, base)
  );
}
"""

# Effects

GLOW_TEMPLATE = """
// Glow effect
vec3 {{name}}(vec3 color, float intensity, float size) {
  float luminance = dot(color, vec3(0.299, 0.587, 0.114));
  return color + color * luminance * intensity * size;
}
"""

NOISE_TEMPLATE = """
// Noise function
float {{name}}(vec2 p, float scale, float speed) {
  vec2 scaled = p * scale + iTime * speed;
  return fract(sin(dot(scaled, vec2(12.9898, 78.233))) * 43758.5453);
}
"""

RIPPLE_TEMPLATE = """
// Ripple effect
float {{name}}(vec2 uv, vec2 center, float frequency, float amplitude, float speed) {
  float d = length(uv - center);
  return sin(d * frequency - iTime * speed) * amplitude * (1.0 - d);
}
"""
