"""
Client facade for the task review system.
"""
