"""Per-preset rendering state: expression evaluation and shader sources."""

from __future__ import annotations

from flarkviz.evaluator import MilkdropEval
from flarkviz.expression_types import ExecutionContext
from flarkviz.preset import MilkDropPreset
from flarkviz.shaders import (
    ShaderType,
    default_fragment_source,
    milkdrop_fragment_source,
)


class RenderState:
    """Runs a preset's equations frame by frame and holds its shader sources."""

    def __init__(self) -> None:
        self._per_frame_init_eval = MilkdropEval()
        self._per_frame_eval = MilkdropEval()
        self._per_pixel_eval = MilkdropEval()
        self._context = ExecutionContext()
        self._preset: MilkDropPreset | None = None
        self._frame_count = 0
        self._total_time = 0.0
        self._init_executed = False
        self._warp_shader: str | None = None
        self._composite_shader: str | None = None

    @property
    def context(self) -> ExecutionContext:
        """Variables seen by the preset's equations."""
        return self._context

    @property
    def preset(self) -> MilkDropPreset | None:
        """The loaded preset, if any."""
        return self._preset

    @property
    def has_preset(self) -> bool:
        """Whether a preset is loaded."""
        return self._preset is not None

    @property
    def warp_shader(self) -> str | None:
        """GLSL fragment source of the warp pass."""
        return self._warp_shader

    @property
    def composite_shader(self) -> str | None:
        """GLSL fragment source of the composite pass."""
        return self._composite_shader

    @property
    def frame_count(self) -> int:
        """Number of frames executed since the preset was loaded."""
        return self._frame_count

    @property
    def total_time(self) -> float:
        """Seconds accumulated since the preset was loaded."""
        return self._total_time

    def reset(self) -> None:
        """Return to the state before any preset was loaded."""
        self._context = ExecutionContext()
        self._frame_count = 0
        self._total_time = 0.0
        self._init_executed = False
        self._preset = None
        self._per_frame_init_eval.clear()
        self._per_frame_eval.clear()
        self._per_pixel_eval.clear()
        self._warp_shader = None
        self._composite_shader = None

    def load_preset(self, preset: MilkDropPreset) -> None:
        """Compile a preset's code and seed the context from its parameters.

        Raises CompilationError when any of its equation blocks does not compile.
        """
        self.reset()
        self._preset = preset

        if preset.per_frame_init_code:
            self._per_frame_init_eval.compile_block(preset.per_frame_init_code)
        if preset.per_frame_code:
            self._per_frame_eval.compile_block(preset.per_frame_code)
        if preset.per_pixel_code:
            self._per_pixel_eval.compile_block(preset.per_pixel_code)

        self._warp_shader = self._shader_source(preset.warp_shader_code, ShaderType.WARP)
        self._composite_shader = self._shader_source(
            preset.comp_shader_code, ShaderType.COMPOSITE
        )

        ctx = self._context
        ctx.zoom = preset.decay
        ctx.rot = preset.rot
        ctx.cx = preset.rot_cx
        ctx.cy = preset.rot_cy
        ctx.dx = preset.x_push
        ctx.dy = preset.y_push
        ctx.warp = preset.warp_amount
        ctx.sx = preset.stretch_x
        ctx.sy = preset.stretch_y
        ctx.wave_r = preset.wave_r
        ctx.wave_g = preset.wave_g
        ctx.wave_b = preset.wave_b
        ctx.wave_a = 1.0

    @staticmethod
    def _shader_source(code: str, shader_type: ShaderType) -> str:
        if code:
            return milkdrop_fragment_source(code, shader_type)
        return default_fragment_source(shader_type)

    def execute_frame(self, delta_time: float) -> ExecutionContext:
        """Advance time, run the init code once and the per-frame code, and return the context."""
        preset = self._preset
        if preset is None:
            return self._context

        self._total_time += delta_time
        self._context.time = self._total_time
        self._context.frame = float(self._frame_count)

        if not self._init_executed and preset.per_frame_init_code:
            self._per_frame_init_eval.execute(self._context)
            self._init_executed = True

        if preset.per_frame_code:
            self._per_frame_eval.execute(self._context)

        self._frame_count += 1
        return self._context

    def update_audio_data(
        self,
        bass: float,
        mid: float,
        treb: float,
        bass_att: float,
        mid_att: float,
        treb_att: float,
    ) -> None:
        """Copy the latest audio levels into the context."""
        ctx = self._context
        ctx.bass = bass
        ctx.mid = mid
        ctx.treb = treb
        ctx.bass_att = bass_att
        ctx.mid_att = mid_att
        ctx.treb_att = treb_att