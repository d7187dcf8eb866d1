"""Command line argument parsing."""

from .parser import ArgumentParser

__all__ = ["ArgumentParser"]
