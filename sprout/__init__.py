"""
Sprout - child growth analysis.

Aligns a child's height/weight measurements with WHO reference curves
and classifies them into clinical percentile bands.
"""

__version__ = "0.1.0"
