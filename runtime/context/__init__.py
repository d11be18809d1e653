"""
Per-logger context: the field snapshot and host context providers.
"""
