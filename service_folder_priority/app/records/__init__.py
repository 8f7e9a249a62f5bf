"""
Record handling: payload normalization and path extraction.
"""
