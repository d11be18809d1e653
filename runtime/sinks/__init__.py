"""
System-level sinks notified after each committed record.
"""
