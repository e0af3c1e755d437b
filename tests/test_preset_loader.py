import pytest

from flarkviz.preset_loader import PresetLoadError, load_preset, load_preset_from_string


def test_load_preset_from_file(tmp_path):
    path = tmp_path / "nice.milk"
    path.write_text("[preset00]\nname=Nice\nfDecay=0.9\n", encoding="utf-8")
    preset = load_preset(path)
    assert preset.name == "Nice"
    assert preset.decay == 0.9


def test_load_preset_accepts_string_path(tmp_path):
    path = tmp_path / "str.milk"
    path.write_text("author=someone\n", encoding="utf-8")
    assert load_preset(str(path)).author == "someone"


def test_missing_file_is_reported(tmp_path):
    with pytest.raises(PresetLoadError, match="^File does not exist: "):
        load_preset(tmp_path / "missing.milk")


def test_wrong_extension_is_reported(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("name=x\n", encoding="utf-8")
    with pytest.raises(PresetLoadError, match=r"^Not a \.milk file: notes\.txt$"):
        load_preset(path)


def test_double_preset_extension_is_rejected(tmp_path):
    path = tmp_path / "pair.milk2"
    path.write_text("[preset_a]\n", encoding="utf-8")
    with pytest.raises(PresetLoadError, match="Not a .milk file"):
        load_preset(path)


def test_unparsable_file_is_reported(tmp_path):
    path = tmp_path / "broken.milk"
    path.write_text("[shape_]\n", encoding="utf-8")
    with pytest.raises(PresetLoadError, match="^Failed to parse preset file: broken.milk$"):
        load_preset(path)


def test_load_from_string():
    preset = load_preset_from_string("name=Inline\nbSolarize=1\n[per_frame_1]\nfoo")
    assert preset.name == "Inline"
    assert preset.solarize is True
    assert preset.per_frame_code == "foo"


def test_load_from_string_error():
    with pytest.raises(PresetLoadError, match="^Failed to parse preset from string$"):
        load_preset_from_string("[wave_]")