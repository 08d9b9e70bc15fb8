"""
setcubes - Set-theory cube puzzle engine and solvability search.
"""

__version__ = "1.0.0"
