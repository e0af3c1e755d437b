import pytest

from flarkviz import milk2
from flarkviz.milk2 import DoublePreset
from flarkviz.preset import MilkDropPreset


def sample():
    return DoublePreset(
        preset_a=MilkDropPreset(rating=4.0, decay=0.9, gamma_adj=1.5),
        preset_b=MilkDropPreset(rating=1.0, decay=0.5, gamma_adj=2.0),
        blend_factor=0.25,
        transition_type=7,
        transition_duration=3.5,
    )


def test_format_starts_with_metadata():
    text = milk2.format_double_preset(DoublePreset())
    assert text.startswith("[milk2_meta]\nversion=1.0\n")
    assert "blend_factor=0.5\n" in text
    assert "[preset_a]\n[preset00]\n" in text
    assert "[preset_b]\n[preset00]\n" in text


def test_round_trip_through_text():
    original = sample()
    loaded = milk2.load_from_string(milk2.format_double_preset(original))
    assert loaded.blend_factor == original.blend_factor
    assert loaded.transition_type == original.transition_type
    assert loaded.transition_duration == original.transition_duration
    for attr in ("rating", "decay", "gamma_adj"):
        assert getattr(loaded.preset_a, attr) == getattr(original.preset_a, attr)
        assert getattr(loaded.preset_b, attr) == getattr(original.preset_b, attr)


def test_defaults_without_metadata():
    loaded = milk2.load_from_string("[preset_a]\nfRating=2\n[preset_b]\nfRating=4\n")
    defaults = DoublePreset()
    assert loaded.blend_factor == defaults.blend_factor
    assert loaded.transition_type == defaults.transition_type
    assert loaded.transition_duration == defaults.transition_duration
    assert loaded.preset_a.rating == 2.0
    assert loaded.preset_b.rating == 4.0


def test_metadata_after_second_preset_ends_it():
    loaded = milk2.load_from_string(
        "[preset_a]\nfRating=1\n[preset_b]\nfRating=2\n"
        "[milk2_meta]\nblend_factor=0.75\nfDecay=0.5\n"
    )
    assert loaded.blend_factor == 0.75
    assert loaded.preset_b.rating == 2.0
    assert loaded.preset_b.decay == MilkDropPreset().decay


def test_first_preset_needs_second_section():
    loaded = milk2.load_from_string("[preset_a]\nfRating=5\n")
    assert loaded.preset_a.rating == MilkDropPreset().rating
    assert loaded.preset_b.rating == MilkDropPreset().rating


def test_metadata_comments_are_ignored():
    loaded = milk2.load_from_string("[milk2_meta]\n// blend_factor=0.9\ntransition_type=3\n")
    assert loaded.blend_factor == DoublePreset().blend_factor
    assert loaded.transition_type == 3


def test_save_uses_crlf(tmp_path):
    path = tmp_path / "pair.milk2"
    milk2.save_to_file(DoublePreset(), path)
    assert path.read_bytes().startswith(b"[milk2_meta]\r\nversion=1.0\r\n")


def test_file_round_trip(tmp_path):
    path = tmp_path / "pair.milk2"
    original = sample()
    milk2.save_to_file(original, path)
    loaded = milk2.load_from_file(path)
    assert loaded.blend_factor == original.blend_factor
    assert loaded.transition_duration == original.transition_duration
    assert loaded.preset_a.decay == original.preset_a.decay
    assert loaded.preset_b.gamma_adj == original.preset_b.gamma_adj


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        milk2.load_from_file(tmp_path / "missing.milk2")