"""
Elfscope Shared Module
======================

Configuration, logging and console utilities used by the elfscope
command-line front end and inspection engine.
"""

from shared.config import ElfscopeConfig

__all__ = ["ElfscopeConfig"]
