"""
Search Summary Gateway.

Searches the web for a query and summarizes the results with a language
model, over a small authenticated HTTP API.
"""

__version__ = "0.1.0"
