"""
Interpreter package — raw Sui transaction to canonical model.

Responsibilities:
- Address pseudonyms, token registry and asset classification.
- Best-effort per-object enrichment.
- Normalization into the canonical model and the fetch/interpret pipeline.
"""
