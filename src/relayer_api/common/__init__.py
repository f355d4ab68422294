"""
Shared infrastructure for relayer_api.

Modules:
    exceptions.py - Typed exception hierarchy and error classification
    logging.py    - Logger helpers and formatters
"""
