"""Slither level authoring model.

Grid-based puzzle levels made of coloured slithers (snake paths) paired
one-to-one with coloured holes, plus the editing tools that keep that
pairing consistent.
"""

__version__ = "0.1.0"
