"""
Helensvale Connect - booking availability for the service marketplace.
"""

__version__ = "0.3.0"
