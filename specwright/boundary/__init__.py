"""
Boundary layer for external system integrations.

Handles interactions with infrastructure: the relational store and the
Redis-backed rate limiter.
"""
