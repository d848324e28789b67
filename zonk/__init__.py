"""
Zonk - dice game opponent engine.
"""

__version__ = "0.1.0"
