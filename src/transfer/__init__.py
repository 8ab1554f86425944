"""Bundle materialization and pipeline orchestration.

This package writes bundles into the destination tree and sequences the
discovery, bundling, hashing, and materialization stages per root.
"""
