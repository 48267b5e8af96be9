"""Exam submission and evaluation workflow."""

from importlib import resources

__version__ = resources.files(__name__).joinpath("VERSION.txt").read_text().strip()
