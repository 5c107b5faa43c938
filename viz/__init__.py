"""
Visualization Package.

Helpers that turn computed layouts, connections and camera poses into plain
element dictionaries a browser or 3D renderer can draw directly.
"""

# Visualization Package
