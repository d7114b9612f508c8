"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the resolver to external systems like:
- The Centrala HTTP API (lookups, answer submission)
- Chat models (extraction, normalization, candidate choice)
- Rule-based normalization
- Caching systems (in-memory, null)
"""
