"""Form conversion and media bundling.

This package turns discovered form files into JSON values, resolves the
media filenames they reference, and attaches content digests.
"""
