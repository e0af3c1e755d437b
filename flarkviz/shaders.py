"""HLSL-to-GLSL conversion and fragment shader sources for the two render passes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class ShaderType(Enum):
    """The two shader passes of a preset."""

    WARP = "warp"
    COMPOSITE = "composite"


@dataclass
class ShaderCode:
    """Shader source as found in a preset and after conversion."""

    hlsl: str = ""
    glsl: str = ""
    type: ShaderType = ShaderType.WARP
    compiled: bool = False


USER_SHADER_MARKER = "// USER_SHADER_CODE"
USER_MAIN_MARKER = "// USER_MAIN_CODE"

VERTEX_SHADER = """
#version 330 core

layout(location = 0) in vec2 aPos;
layout(location = 1) in vec2 aTexCoord;

out vec2 uv;
out vec2 uv_orig;

void main()
{
    gl_Position = vec4(aPos, 0.0, 1.0);
    uv = aTexCoord;
    uv_orig = aTexCoord;
}
"""

_UNIFORM_BLOCK = """
in vec2 uv;
in vec2 uv_orig;
out vec4 FragColor;

// Texture samplers
uniform sampler2D mainTexture;

// Time variables
uniform float time;
uniform float frame;
uniform float fps;

// Audio variables
uniform float bass;
uniform float mid;
uniform float treb;
uniform float bass_att;
uniform float mid_att;
uniform float treb_att;

// Preset state
uniform float zoom;
uniform float rot;
uniform float cx;
uniform float cy;
uniform float dx;
uniform float dy;
uniform float warp;
uniform float sx;
uniform float sy;

// Resolution
uniform vec2 resolution;

// Custom variables (q1-q32)
uniform float q1, q2, q3, q4, q5, q6, q7, q8;
uniform float q9, q10, q11, q12, q13, q14, q15, q16;
uniform float q17, q18, q19, q20, q21, q22, q23, q24;
uniform float q25, q26, q27, q28, q29, q30, q31, q32;

// Helper variables
vec2 uv_center = uv - vec2(0.5, 0.5);
float rad = length(uv_center);
float ang = atan(uv_center.y, uv_center.x);

// User shader code will be injected here
// USER_SHADER_CODE
"""

WARP_FRAGMENT_BASE = (
    "\n#version 330 core\n"
    + _UNIFORM_BLOCK
    + """
void main()
{
    vec2 uv_warped = uv;

    // USER_MAIN_CODE

    FragColor = texture(mainTexture, uv_warped);
}
"""
)

COMPOSITE_FRAGMENT_BASE = (
    "\n#version 330 core\n"
    + _UNIFORM_BLOCK
    + """
void main()
{
    vec4 color = texture(mainTexture, uv);

    // USER_MAIN_CODE

    FragColor = color;
}
"""
)

_PASSTHROUGH_FRAGMENT = """
#version 330 core

in vec2 uv;
out vec4 FragColor;

uniform sampler2D mainTexture;

void main()
{
    FragColor = texture(mainTexture, uv);
}
"""

DEFAULT_WARP_FRAGMENT = _PASSTHROUGH_FRAGMENT
DEFAULT_COMPOSITE_FRAGMENT = _PASSTHROUGH_FRAGMENT


def _whole_word(word: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![A-Za-z0-9_]){re.escape(word)}(?![A-Za-z0-9_])")


# Applied in this order; each type is replaced only where it stands as a whole word.
_TYPE_REPLACEMENTS = [
    (_whole_word(hlsl_type), glsl_type)
    for hlsl_type, glsl_type in sorted(
        {
            "float2": "vec2",
            "float3": "vec3",
            "float4": "vec4",
            "half": "float",
            "half2": "vec2",
            "half3": "vec3",
            "half4": "vec4",
        }.items()
    )
]

_FUNCTION_REPLACEMENTS = [
    (re.compile(r"tex2D\s*\("), "texture("),
    (re.compile(r"mul\s*\(\s*([^,]+)\s*,\s*([^)]+)\s*\)"), r"(\1 * \2)"),
    (re.compile(r"lerp\s*\("), "mix("),
    (re.compile(r"saturate\s*\(\s*([^)]+)\s*\)"), r"clamp(\1, 0.0, 1.0)"),
    (re.compile(r"frac\s*\("), "fract("),
]

_SEMANTICS = re.compile(r":\s*[A-Z_][A-Z0-9_]*")


def _replace_types(code: str) -> str:
    for pattern, replacement in _TYPE_REPLACEMENTS:
        code = pattern.sub(replacement, code)
    return code


def _replace_functions(code: str) -> str:
    for pattern, replacement in _FUNCTION_REPLACEMENTS:
        code = pattern.sub(replacement, code)
    return code


def _remove_semantics(code: str) -> str:
    return _SEMANTICS.sub("", code)


def convert_hlsl_to_glsl(hlsl: str) -> str:
    """Rewrite HLSL types, intrinsics and semantics into their GLSL forms."""
    return _remove_semantics(_replace_functions(_replace_types(hlsl)))


def inject_code_into_template(template: str, user_code: str) -> str:
    """Put ``user_code`` at the shader-code marker and drop the main-code marker."""
    result = template.replace(USER_SHADER_MARKER, user_code, 1)
    return result.replace(USER_MAIN_MARKER, "", 1)


def _base_template(shader_type: ShaderType) -> str:
    if shader_type is ShaderType.WARP:
        return WARP_FRAGMENT_BASE
    return COMPOSITE_FRAGMENT_BASE


def milkdrop_fragment_source(hlsl: str, shader_type: ShaderType) -> str:
    """Full GLSL fragment source for a preset's HLSL shader of the given pass."""
    return inject_code_into_template(_base_template(shader_type), convert_hlsl_to_glsl(hlsl))


def default_fragment_source(shader_type: ShaderType) -> str:
    """Passthrough fragment source used when a preset has no shader for the pass."""
    if shader_type is ShaderType.WARP:
        return DEFAULT_WARP_FRAGMENT
    return DEFAULT_COMPOSITE_FRAGMENT