"""Configuration options for pagereflow.

Options are frozen dataclasses; use ``create_updated`` to derive a modified
copy and ``from_mapping`` to build one from a configuration file section.
"""

from pagereflow.options.base import CloneFrozenMixin
from pagereflow.options.extract import ExtractOptions
from pagereflow.options.reflow import ReflowOptions

__all__ = ["CloneFrozenMixin", "ExtractOptions", "ReflowOptions"]
