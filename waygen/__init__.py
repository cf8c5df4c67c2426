"""Waygen - Go binding generator for Wayland-style protocols."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("waygen")
except PackageNotFoundError:
    __version__ = "(local)"
