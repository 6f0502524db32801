"""
Common Helpers Module Initialization
"""
