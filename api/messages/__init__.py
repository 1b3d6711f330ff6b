"""
Message board: offset/cursor pagination, create and delete.
"""
