import pytest

from flarkviz.preset import MilkDropPreset, WaveOrShape


def load(text):
    preset = MilkDropPreset()
    preset.load_from_string(text)
    return preset


def test_defaults():
    preset = MilkDropPreset()
    assert preset.rating == 3.0
    assert preset.decay == 0.98
    assert preset.wave_smoothing == 0.75
    assert preset.waves == []
    assert preset.per_frame_code == ""


def test_scalar_keys_are_parsed():
    preset = load(
        "[preset00]\nname=Glow\nauthor=someone\nfRating=4.5\nfDecay=0.9\n"
        "nWaveMode=5\nbWaveDots=1\nbInvert=0\nwave_r=0.25\nfRotCX=0.3\n"
    )
    assert preset.name == "Glow"
    assert preset.author == "someone"
    assert preset.rating == 4.5
    assert preset.decay == 0.9
    assert preset.wave_mode == 5
    assert preset.wave_dots is True
    assert preset.invert is False
    assert preset.wave_r == 0.25
    assert preset.rot_cx == 0.3


def test_version_key_sets_name():
    assert load("MILKDROP_PRESET_VERSION=201").name == "201"


def test_keys_and_values_are_trimmed():
    assert load("   fRating =   2.5  ").rating == 2.5


def test_unparsable_numbers_read_as_zero():
    preset = load("fDecay=abc\nnWaveMode=x\nbBrighten=yes")
    assert preset.decay == 0.0
    assert preset.wave_mode == 0
    assert preset.brighten is False


def test_leading_number_prefix_is_used():
    preset = load("fDecay=0.5xyz\nnWaveMode=7.9")
    assert preset.decay == 0.5
    assert preset.wave_mode == 7


def test_comments_and_blank_lines_are_skipped():
    preset = load("// fRating=5\n\n    \nfRating=1.5")
    assert preset.rating == 1.5


def test_crlf_line_endings():
    preset = load("fRating=1.5\r\nfDecay=0.5\r\n")
    assert preset.rating == 1.5
    assert preset.decay == 0.5


def test_wave_section_creates_entries():
    preset = load("[wave_2]\nr=0.25\na=0.5\n")
    assert len(preset.waves) == 3
    assert preset.waves[-1].enabled
    assert not any(wave.enabled for wave in preset.waves[:-1])
    assert preset.waves[2].r == 0.25
    assert preset.waves[2].a == 0.5


def test_shape_section_keys():
    preset = load("[shape_1]\nsides=6\nthick=1\nadditive=1\nrad=0.1\ng=0.5\n")
    shape = preset.shapes[1]
    assert shape.enabled
    assert shape.sides == 6
    assert shape.thick is True
    assert shape.additive is True
    assert shape.rad == 0.1
    assert shape.g == 0.5
    assert preset.waves == []


def test_earlier_wave_section_takes_keys_over_shape():
    preset = load("[wave_0]\n[shape_0]\nr=0.5\n")
    assert preset.waves[0].r == 0.5
    assert preset.shapes[0].r == WaveOrShape().r


def test_wave_ignores_shape_only_keys():
    preset = load("[wave_0]\nsides=9\n")
    assert preset.waves[0].sides == WaveOrShape().sides


def test_global_keys_win_inside_wave_section():
    preset = load("[wave_0]\nfDecay=0.5\n")
    assert preset.decay == 0.5


def test_missing_section_index_raises():
    with pytest.raises(ValueError):
        load("[wave_]")


def test_trailing_code_section_is_kept():
    preset = load("[per_frame_1]\nfoo\nbar")
    assert preset.per_frame_code == "foo\nbar"


def test_trailing_composite_section_is_kept():
    preset = load("[comp_1]\nshader_body\n")
    assert preset.comp_shader_code == "shader_body"


def test_code_is_dropped_when_another_section_starts():
    preset = load("[per_frame_1]\nfoo\n[per_pixel_1]\nbaz")
    assert preset.per_frame_code == ""
    assert preset.per_pixel_code == "baz"


def test_assignment_lines_are_not_code():
    preset = load("[warp_1]\nzoom=2\nfoo")
    assert preset.warp_shader_code == "foo"


def test_reload_clears_previous_content():
    preset = load("name=A\n[wave_0]\n[per_frame_1]\nfoo")
    preset.load_from_string("fRating=2")
    assert preset.name == ""
    assert preset.waves == []
    assert preset.per_frame_code == ""
    assert preset.rating == 2.0


def test_reset_restores_basic_parameters():
    preset = MilkDropPreset(decay=0.1, rating=5.0, invert=True, name="x")
    preset.reset()
    fresh = MilkDropPreset()
    assert preset.decay == fresh.decay
    assert preset.rating == fresh.rating
    assert preset.invert == fresh.invert
    assert preset.name == fresh.name


def test_load_from_file(tmp_path):
    path = tmp_path / "a.milk"
    path.write_text("name=FromDisk\nfGammaAdj=1.5\n", encoding="utf-8")
    preset = MilkDropPreset()
    preset.load_from_file(path)
    assert preset.name == "FromDisk"
    assert preset.gamma_adj == 1.5


def test_load_from_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        MilkDropPreset().load_from_file(tmp_path / "missing.milk")