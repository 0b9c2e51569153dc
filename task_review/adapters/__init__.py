"""
Adapters for external storage and notification services.
"""
