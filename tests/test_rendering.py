"""Tests for frame rendering."""

import numpy as np
import pytest
from PIL import Image

from deerdash import snapshot, GROUND_Y
from deerdash.rendering import create_color_scheme, load_avatar_sprite, render_frame, create_video
from conftest import place_spike


class TestColorScheme:

    @pytest.mark.parametrize("name", ["meadow", "dusk", "mono"])
    def test_known_schemes(self, name):
        colors = create_color_scheme(name)
        assert "avatar" in colors
        assert "spike" in colors

    def test_unknown_scheme(self):
        with pytest.raises(ValueError):
            create_color_scheme("neon")


class TestSprite:
    """Test avatar image loading."""

    def test_missing_sprite(self, tmp_path):
        assert load_avatar_sprite(str(tmp_path / "missing.png")) is None

    def test_unreadable_sprite(self, tmp_path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")
        assert load_avatar_sprite(str(path)) is None

    def test_sprite_resized_to_avatar(self, tmp_path):
        path = tmp_path / "deer.png"
        Image.new("RGBA", (10, 10), (0, 0, 255, 255)).save(path)

        sprite = load_avatar_sprite(str(path))

        assert sprite.shape == (82, 86, 4)
        assert sprite.dtype == np.uint8


class TestRenderFrame:
    """Test drawing snapshots."""

    def test_frame_shape(self, fresh_session):
        frame = render_frame(snapshot(fresh_session))
        assert frame.shape == (480, 900, 3)
        assert frame.dtype == np.uint8

    def test_scaled_frame(self, fresh_session):
        frame = render_frame(snapshot(fresh_session), scale=0.5)
        assert frame.shape == (240, 450, 3)

    def test_placeholder_avatar(self, fresh_session):
        frame = render_frame(snapshot(fresh_session))
        # Inside the avatar box, away from its detail patch
        assert tuple(frame[378, 190]) == create_color_scheme("meadow")["avatar"]

    def test_sprite_avatar(self, fresh_session, tmp_path):
        path = tmp_path / "deer.png"
        Image.new("RGBA", (10, 10), (0, 0, 255, 255)).save(path)

        frame = render_frame(snapshot(fresh_session), sprite=load_avatar_sprite(str(path)))

        assert tuple(frame[378, 190]) == (0, 0, 255)

    def test_spike_drawn(self, playing_session):
        state = place_spike(playing_session, 500.0, 40.0, 60.0)
        frame = render_frame(snapshot(state), color_scheme="mono")
        assert tuple(frame[GROUND_Y - 10, 520]) == create_color_scheme("mono")["spike"]

    def test_hud_toggle(self, fresh_session):
        snap = snapshot(fresh_session)
        with_hud = render_frame(snap)
        without_hud = render_frame(snap, show_hud=False)
        assert not np.array_equal(with_hud, without_hud)


class TestVideo:

    def test_no_frames(self, tmp_path):
        assert create_video([], filename=str(tmp_path / "empty.mp4")) is None
        assert not (tmp_path / "empty.mp4").exists()
