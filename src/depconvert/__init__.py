"""
depconvert: Convert legacy Go dependency metadata.

Reads Godeps.json, glide.yaml/glide.lock and vendor.conf files and produces
a normalized manifest (constraints and ignores) and lock (resolved versions).
"""

__version__ = "0.1.0"
