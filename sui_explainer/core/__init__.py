"""
Core utilities — error taxonomy and cross-cutting concerns.

Provides the exception hierarchy shared by the RPC client, pipeline and
API server, plus classification of raw transport failures.
"""
