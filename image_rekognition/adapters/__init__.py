"""
AWS and in-process implementations of the core ports.
"""
