"""
Core module for shared domain infrastructure.

This module contains:
- Domain exceptions and value objects
- Adapter wiring built from settings
- Middleware components
- Metrics and tracing setup
"""
