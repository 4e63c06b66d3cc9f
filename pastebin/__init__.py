"""
Pastebin - short-lived paste storage with pluggable backends.
"""
__version__ = "1.0.0"
