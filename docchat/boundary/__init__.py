"""
Boundary layer for external system integrations.

Handles all interactions with external systems (relational store, blob
storage, model APIs). Provides adapters for infrastructure dependencies.
"""
