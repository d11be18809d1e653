"""
Write path: the single-writer channel all commits pass through.
"""
