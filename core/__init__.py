"""
Core module for shared infrastructure.

This module contains:
- Domain exceptions, value objects, events and the clock
- The in-memory event bus and its audit and metrics handlers
- Observability and metrics middleware
- Health, readiness and metrics views
"""
