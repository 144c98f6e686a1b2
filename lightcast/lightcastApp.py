#!/usr/bin/env python3
# ================================================================
# 2D Light Occlusion Visualizer
#
# A point light casts rays in every direction; an opaque disc in
# the middle of the window truncates the rays that hit it.
#
# Controls:
#   A     - automatic mode (light orbits the blocker)
#   D     - drag mode (hold the left button and move the light)
#
# Usage:
#   lightcast
#   lightcast --config lightcast.yaml --watch
#   lightcast --mode drag --rays 720 --hud
#   lightcast --write-config lightcast.yaml
# ================================================================
import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

import pygame

from lightcast.common.loggingConfig import setup_logging
from lightcast.settings.lightSettings import (
    MODES, Settings, SettingsError, load_settings, write_settings,
)
from lightcast.settings.settingsWatcher import SettingsWatcher
from lightcast.sim.lightEvents import poll_events
from lightcast.sim.lightRenderer import PygameSurface, render_frame
from lightcast.sim.lightScene import SceneState, step

logger = logging.getLogger(__name__)


def cli_overrides(args) -> dict:
    overrides = {}
    if args.mode is not None:
        overrides["mode"] = args.mode
    if args.rays is not None:
        overrides["num_rays"] = args.rays
    if args.max_range is not None:
        overrides["max_range"] = args.max_range
    if args.fps is not None:
        overrides["fps"] = args.fps
    if args.hud:
        overrides["show_hud"] = True
    return overrides


def build_settings(args) -> Settings:
    """Settings file (if any) first, then command line flags on top."""
    settings = load_settings(args.config) if args.config else Settings()
    return replace(settings, **cli_overrides(args)).validate()


def open_window(settings: Settings) -> PygameSurface:
    """Raises pygame.error when no display or window can be created."""
    pygame.display.init()
    screen = pygame.display.set_mode((settings.width, settings.height))
    pygame.display.set_caption(settings.title)

    font = None
    try:
        pygame.font.init()
        font = pygame.font.SysFont("monospace", 14)
    except pygame.error as e:
        logger.warning("No font available, HUD disabled: %s", e)
    return PygameSurface(screen, font)


def run_loop(scene: SceneState, surface, settings: Settings, watcher=None, max_frames=None) -> int:
    """Frame loop: events → scene → draw → present → pace. Returns frames drawn."""
    clock = pygame.time.Clock()
    frames = 0
    running = True
    while running:
        if watcher is not None:
            reloaded = watcher.latest()
            if reloaded is not None:
                settings = reloaded
                scene.retune(settings)
                logger.info("Applied reloaded settings")

        running = step(scene, poll_events())

        surface.clear(settings.background_color)
        render_frame(scene, surface, settings)
        surface.present()
        clock.tick(settings.fps)

        frames += 1
        if max_frames is not None and frames >= max_frames:
            running = False
    return frames


def run(args) -> int:
    try:
        settings = build_settings(args)
    except SettingsError as e:
        logger.error("Invalid settings: %s", e)
        return 1

    if args.write_config:
        write_settings(settings, args.write_config)
        return 0

    try:
        surface = open_window(settings)
    except pygame.error as e:
        logger.error("Window creation failed: %s", e)
        pygame.quit()
        return 1

    watcher = None
    try:
        scene = SceneState.from_settings(settings)
        logger.info("Started in %s mode with %d rays", scene.mode.stateId, settings.num_rays)

        if args.watch and args.config:
            overrides = cli_overrides(args)
            watcher = SettingsWatcher(
                Path(args.config),
                lambda path: replace(load_settings(path), **overrides).validate()
            )
            watcher.start()
        elif args.watch:
            logger.warning("--watch needs --config, ignoring")

        frames = run_loop(scene, surface, settings, watcher, args.frames)
        logger.info("Stopped after %d frames", frames)
    finally:
        if watcher is not None and watcher.observer.is_alive():
            watcher.stop()
        pygame.quit()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lightcast", description="2D light occlusion visualizer")
    parser.add_argument("--config", help="YAML settings file")
    parser.add_argument("--watch", action="store_true",
                        help="Reload the settings file when it changes")
    parser.add_argument("--mode", choices=MODES, help="Initial interaction mode")
    parser.add_argument("--rays", type=int, help="Number of rays (default: 360)")
    parser.add_argument("--max-range", type=float, help="Maximum ray length (default: 1000)")
    parser.add_argument("--fps", type=int, help="Frame rate limit (default: 60)")
    parser.add_argument("--hud", action="store_true", help="Show the status overlay")
    parser.add_argument("--frames", type=int, default=None,
                        help="Exit after this many frames")
    parser.add_argument("--write-config", metavar="PATH",
                        help="Write the resolved settings to PATH and exit")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
