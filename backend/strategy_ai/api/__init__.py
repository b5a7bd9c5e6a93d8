"""
HTTP surface for the search core.
"""
