"""Core (pure) library layer.

This package is intended to be UI-agnostic and safe to import from:
- the Streamlit app
- the HTTP API and CLI entrypoints
- tests

It should not import Streamlit or call the network at import time.
"""
