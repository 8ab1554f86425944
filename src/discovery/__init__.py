"""Form and media discovery.

This package walks root directories, parses candidate XML files, and
classifies which of them are ODK forms.
"""
