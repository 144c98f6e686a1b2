import logging

import pygame
import pytest
import yaml

from lightcast import lightcastApp
from lightcast.lightcastApp import build_parser, build_settings, main, run, run_loop
from lightcast.settings.lightSettings import Settings
from lightcast.sim.lightEvents import Quit
from lightcast.sim.lightScene import SceneState


def parse(*argv):
    return build_parser().parse_args(list(argv))


class TestBuildSettings:
    def test_defaults_without_config(self):
        assert build_settings(parse()) == Settings()

    def test_flags_override_file(self, tmp_path):
        path = tmp_path / "lightcast.yaml"
        path.write_text("num_rays: 90\nmax_range: 300\n")
        s = build_settings(parse("--config", str(path), "--rays", "45", "--hud"))
        assert s.num_rays == 45
        assert s.max_range == 300.0
        assert s.show_hud is True


class TestRun:
    def test_runs_a_few_frames(self, caplog):
        with caplog.at_level(logging.INFO, logger="lightcast"):
            assert run(parse("--frames", "3", "--hud")) == 0
        assert "Stopped after 3 frames" in caplog.text

    def test_quit_event_ends_loop(self, scene, surface, monkeypatch):
        monkeypatch.setattr(lightcastApp, "poll_events", lambda: iter([Quit()]))
        frames = run_loop(scene, surface, Settings())
        assert frames == 1
        kinds = [c[0] for c in surface.commands]
        assert kinds[0] == "clear"
        assert kinds[-1] == "present"
        assert kinds.count("line") == 360

    def test_window_failure_exits_with_status_1(self, monkeypatch, caplog):
        def broken(*args, **kwargs):
            raise pygame.error("No available video device")
        monkeypatch.setattr(pygame.display, "set_mode", broken)
        with caplog.at_level(logging.ERROR, logger="lightcast"):
            assert run(parse("--frames", "1")) == 1
        assert "No available video device" in caplog.text

    def test_pygame_quit_after_scene_setup_failure(self, monkeypatch):
        quits = []
        real_quit = pygame.quit

        def broken(settings):
            raise RuntimeError("scene setup failed")

        def recording_quit():
            quits.append(True)
            real_quit()

        monkeypatch.setattr(lightcastApp.SceneState, "from_settings", broken)
        monkeypatch.setattr(pygame, "quit", recording_quit)
        with pytest.raises(RuntimeError, match="scene setup failed"):
            run(parse("--frames", "1"))
        assert quits == [True]

    def test_watcher_stopped_after_loop_failure(self, tmp_path, monkeypatch):
        path = tmp_path / "lightcast.yaml"
        path.write_text("num_rays: 12\n")
        watchers = []

        class RecordingWatcher:
            def __init__(self, path, loader):
                self.stopped = False
                self.observer = self
                watchers.append(self)

            def start(self):
                pass

            def is_alive(self):
                return True

            def stop(self):
                self.stopped = True

        def broken(*args, **kwargs):
            raise RuntimeError("loop failed")

        monkeypatch.setattr(lightcastApp, "SettingsWatcher", RecordingWatcher)
        monkeypatch.setattr(lightcastApp, "run_loop", broken)
        with pytest.raises(RuntimeError, match="loop failed"):
            run(parse("--config", str(path), "--watch", "--frames", "1"))
        assert len(watchers) == 1 and watchers[0].stopped

    def test_non_finite_range_flag_exits_with_status_1(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["--max-range", "inf", "--frames", "1"])
        assert excinfo.value.code == 1

    def test_invalid_config_exits_with_status_1(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("blocker_radius: -1\n")
        with pytest.raises(SystemExit) as excinfo:
            main(["--config", str(path)])
        assert excinfo.value.code == 1

    def test_write_config(self, tmp_path):
        out = tmp_path / "out.yaml"
        with pytest.raises(SystemExit) as excinfo:
            main(["--rays", "12", "--write-config", str(out)])
        assert excinfo.value.code == 0
        assert yaml.safe_load(out.read_text())["num_rays"] == 12

    def test_watch_applies_reloaded_settings(self, tmp_path, surface, monkeypatch):
        class FakeWatcher:
            def __init__(self):
                self.pending = [Settings(num_rays=12, orbit_radius=50.0)]

            def latest(self):
                return self.pending.pop() if self.pending else None

        monkeypatch.setattr(lightcastApp, "poll_events", lambda: iter([]))
        scene = SceneState.from_settings(Settings())
        frames = run_loop(scene, surface, Settings(), FakeWatcher(), max_frames=2)
        assert frames == 2
        assert scene.orbit_radius == 50.0
        assert surface.commands.count(("present",)) == 2
        assert len(surface.of_kind("line")) == 24


def test_main_exits_cleanly():
    with pytest.raises(SystemExit) as excinfo:
        main(["--frames", "2", "--log-level", "WARNING"])
    assert excinfo.value.code == 0
