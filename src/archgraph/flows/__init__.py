"""
Hand-authored flow documents and the manager that owns the open one.
"""
