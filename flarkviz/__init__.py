"""MilkDrop-style visualizer core: expressions, presets, audio analysis, transitions and shader sources."""

__version__ = "1.0.0"