"""
NEAT Run Package

Configuration of training runs.

Modules:
    config: Config class

Exported Classes:
    Config: Training parameters, read from an INI file
"""

from evoneat.run.config import Config

__all__ = ['Config']
