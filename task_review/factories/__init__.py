"""
Factories wiring the task review system from configuration.
"""
