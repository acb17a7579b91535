"""
Sui Transaction Explainer — turns raw Sui transaction blocks into plain language.

Fetches a transaction block over JSON-RPC, enriches changed objects with
best-effort metadata, normalizes object changes into a typed model and
synthesizes bullet, headline and step-by-step descriptions. Modular
architecture with clear separation between RPC transport, interpreter,
summary synthesis and API server.
"""

__version__ = "0.1.0"
