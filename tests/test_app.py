"""
Tests for the command line launcher (no window is opened).
"""

import argparse
import time

import pytest

from goop.app import OverlayListener, _parse_resolution, build_parser, main
from goop.models import FeedbackCue, FeedbackKind, Point2D
from goop.overlay import OverlayRenderer


class TestParser:
    """Test argument parsing."""

    def test_parse_resolution(self):
        assert _parse_resolution("720x1280") == (720, 1280)
        assert _parse_resolution("1920X1080") == (1920, 1080)

    @pytest.mark.parametrize("value", ["720", "axb", "1x2x3"])
    def test_parse_resolution_invalid(self, value):
        with pytest.raises(argparse.ArgumentTypeError):
            _parse_resolution(value)

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.preset is None
        assert args.config is None
        assert args.catalog is None
        assert args.lat is None

    def test_all_options(self):
        args = build_parser().parse_args([
            '--resolution', '800x600', '--preset', 'overlay',
            '--lat', '1.5', '--lng', '-2.5', '--log-level', 'DEBUG',
        ])
        assert args.resolution == (800, 600)
        assert args.preset == 'overlay'
        assert args.lat == 1.5
        assert args.lng == -2.5
        assert args.log_level == 'DEBUG'

    def test_unknown_preset_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['--preset', 'turbo'])


class TestMain:
    """Test startup failures before any window opens."""

    def test_missing_config_file(self, tmp_path, capsys):
        assert main(['--config', str(tmp_path / 'nope.yaml')]) == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_missing_catalog(self, tmp_path, capsys):
        assert main(['--catalog', str(tmp_path / 'nope.yaml')]) == 1
        assert "Creature catalog not found" in capsys.readouterr().err


class TestOverlayListener:
    """Test session hooks reach the renderer."""

    def test_feedback_and_toast_forwarded(self, common_goop):
        renderer = OverlayRenderer()
        listener = OverlayListener(renderer)

        listener.on_feedback(FeedbackCue(
            kind=FeedbackKind.MISS, creature=common_goop, position=Point2D(x=1.0, y=1.0),
        ))
        listener.on_toast("Missed! 4 attempts left")

        assert renderer.animator.animations[0].cue.kind == FeedbackKind.MISS
        renderer.animator.update(time.monotonic())
        assert renderer.animator.toast == "Missed! 4 attempts left"
