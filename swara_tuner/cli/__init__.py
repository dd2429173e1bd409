"""Command-line interface for Swara Tuner."""

from .main import main

__all__ = ["main"]
