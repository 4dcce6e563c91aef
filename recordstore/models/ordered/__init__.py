"""
Ordered index implementations for the record store.
"""

from recordstore.models.ordered.binary_search_tree import BinarySearchTree

__all__ = ["BinarySearchTree"]
