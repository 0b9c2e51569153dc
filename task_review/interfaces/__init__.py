"""
Abstract interfaces for the task review system.

These interfaces define the contracts that concrete implementations
must adhere to, following the Dependency Inversion Principle.

This package contains:
- Provider interfaces for storage and notification adapters
- Repository interfaces for data access
- Service interfaces for the review cycle
"""
