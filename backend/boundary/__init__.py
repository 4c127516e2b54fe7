"""
Boundary layer for external system integrations.

Handles all interactions with AWS APIs.
"""
