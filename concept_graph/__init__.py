"""
Concept Link Graph Engine.

Typed, directed links between knowledge-base concepts, the relationship
vocabulary they use, and a confirmation workflow for generated link
candidates.
"""

__version__ = "1.0.0"
