"""
Sprout knowledge base.

Contains reference knowledge including:
- Synthetic WHO-style growth curves
"""
