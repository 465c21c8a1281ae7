"""
namecheck: naming convention checks for C# declarations.
"""

__version__ = "0.1.0"
