"""Domain layer - documents, query matching and sorting.

This layer has no dependencies on the backing store or the HTTP boundary.
"""
