"""Squadboard: squad leaderboards and weekly MVPs for prediction-market traders."""

__version__ = "0.1.0"
__author__ = "Squadboard Team"

__all__ = ["__version__", "__author__"]
