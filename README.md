# flarkviz

The core of a MilkDrop-style music visualizer, written in Python. Only the analysis of audio needs a library beyond the standard one, and that library is numpy.

- **Expressions**: `flarkviz.lexer.tokenize` splits equation text into tokens. `flarkviz.evaluator.MilkdropEval` compiles equations to bytecode and runs them on a stack machine against a `flarkviz.expression_types.ExecutionContext`.
- **Presets**: `flarkviz.preset.MilkDropPreset` parses `.milk` text. `flarkviz.preset_loader` loads presets from files or strings. `flarkviz.milk2` reads and writes `.milk2` double presets.
- **Audio analysis**: `flarkviz.audio.AudioAnalyzer` computes a smoothed 512-bin spectrum and the bass, mid and treble levels, each with an attenuated version. It also detects beats and reports them as a `Beat`.
- **Transitions**: `flarkviz.transitions.TransitionEngine` tracks the progress of a transition and computes a blend factor for each point. `transition_names()` and `transition_type_from_name()` look up transitions by name.
- **Shaders**: `flarkviz.shaders` converts HLSL to GLSL (`convert_hlsl_to_glsl`) and builds fragment sources for the warp and composite passes (`milkdrop_fragment_source`, `default_fragment_source`).
- **Render state**: `flarkviz.render_state.RenderState` runs a loaded preset frame by frame.
- **Preset library**: `flarkviz.preset_manager.PresetManager` scans a folder for `.milk` and `.milk2` files. It selects presets by index, steps to the next one or to a random one, and goes back through a history of up to 50 random jumps.

## Install

```
pip install .
```

## Evaluating equations

```python
from flarkviz.evaluator import MilkdropEval
from flarkviz.expression_types import ExecutionContext

ev = MilkdropEval()
ev.compile_block("zoom = 1.0 + 0.1*sin(time); q1 = above(bass, 1.5)")
ctx = ExecutionContext()
ctx.time = 2.0
ev.execute(ctx)
print(ctx.zoom, ctx.get_variable("q1"))
```

Statements are separated by semicolons or newlines. The supported functions are:

`sin`, `cos`, `tan`, `asin`, `acos`, `atan`, `atan2`, `sqrt`, `abs`, `sqr`, `pow`, `exp`, `log`, `log10`, `min`, `max`, `sign`, `rand`, `if`, `equal`, `above`, `below`

Arithmetic follows these rules:

- Division by zero and modulo by zero give `0`.
- `sqrt`, `log` and `log10` take the absolute value of their argument first.

If an equation does not compile, `compile` and `compile_block` raise `CompilationError`, and `last_error` holds the message.

## Loading presets

```python
from flarkviz.preset_loader import load_preset, PresetLoadError
from flarkviz import milk2

preset = load_preset("presets/example.milk")
double = milk2.load_from_file("presets/example.milk2")
```

`load_preset` raises `PresetLoadError` in two cases: when the file is missing, and when its name does not end in `.milk`.

`milk2.save_to_file` writes a `.milk2` file with CRLF line endings. The file holds the metadata (blend factor, transition type and duration) and, for each of the two presets, only `fRating`, `fGammaAdj` and `fDecay`. `milk2.format_double_preset` returns the same text as a string.

## Running a preset frame by frame

```python
from flarkviz.render_state import RenderState

state = RenderState()
state.load_preset(preset)
state.update_audio_data(0.8, 0.5, 0.3, 0.7, 0.4, 0.2)
ctx = state.execute_frame(1 / 60)
```

The per-frame init code runs once, on the first frame. The per-frame code runs on every frame. `state.warp_shader` and `state.composite_shader` hold the GLSL fragment source for each pass.

## Analysing audio

```python
from flarkviz.audio import AudioAnalyzer

analyzer = AudioAnalyzer()
analyzer.process_block([left_samples, right_samples])
print(analyzer.bass, analyzer.mid, analyzer.treb)
print(analyzer.detect_beat())
```

Pass one sequence of samples per channel. All channels must have the same length.

## Transitions

```python
from flarkviz.transitions import TransitionEngine, TransitionType

engine = TransitionEngine()
engine.start_transition(TransitionType.CIRCULAR_EXPAND, 2.0)
engine.update(1.0)
print(engine.blend_factor_at(0.5, 0.5))
```

Some transition types have no pattern of their own. For those, the blend factor is an eased crossfade.

## What the package does not do

The package does not:

- open a window or draw anything;
- compile or run shaders on a GPU (`flarkviz.shaders` only produces source text);
- capture audio from a device (you supply the samples to `AudioAnalyzer`);
- offer a keyboard interface or a command-line program;
- mash up presets.

The per-pixel code of a preset is compiled but is not executed.

## Tests

```
pip install .[test]
pytest
```