"""Examples directory.

This directory primarily exists so that the usage examples embedded in the README.rst are
linted as part of CI, together with the rest of the code.
"""
