"""Static inventory of Vue single-file components and TypeScript modules."""

__version__ = "0.1.0"
