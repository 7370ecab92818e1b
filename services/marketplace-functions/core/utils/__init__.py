"""
Shared utilities: configuration, HTTP responses and safe-path extraction.
"""
