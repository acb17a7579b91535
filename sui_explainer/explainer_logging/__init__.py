"""
Structured logging for the Sui Transaction Explainer.

JSON logs with timestamp, level, logger name and event_type.
Use get_logger() in every module for aggregation-friendly output.
"""

from sui_explainer.explainer_logging.logger import bind_digest, configure_logging, get_logger

__all__ = ["bind_digest", "configure_logging", "get_logger"]
