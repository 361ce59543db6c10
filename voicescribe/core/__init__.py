"""
Core module - configuration, domain models and the exception hierarchy.
"""
