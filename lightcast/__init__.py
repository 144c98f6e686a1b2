"""2D light occlusion visualizer."""

__version__ = "0.1.0"
