"""
fltk-check — Pre-flight diagnostic for building fltk-rs.

Verifies that the Rust toolchain, build tools, C++ compiler and the
platform's system libraries are all usable before a real build is tried.
"""

__version__ = "0.1.0"
