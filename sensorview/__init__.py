"""Simulated sensor readings in SQLite, with statistics and live pygame graphs."""

__version__ = "0.1.0"
__all__ = ["storage", "simulator", "analysis", "visualizer", "gsl_visualizer"]