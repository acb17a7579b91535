"""
API server package — HTTP/REST interface to the explainer.
"""
