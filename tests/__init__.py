"""
Tests Package.

This package contains test suites for the spatial layout engine, including
unit tests for the tree layout, pattern arrangement, connection building and
camera choreography, plus tests for the compilers, event adapters, renderer
element builders, the service and the CLI. Randomised patterns are exercised
with seeded generators so every assertion is reproducible.
"""

# Tests Package
