"""
relayer_api - wire data model for a cross-chain relayer's task/event API.

Packages:
    schemas - task, task item and event unions, cost model, validation
    common  - exceptions and logging helpers
"""

__version__ = "0.1.0"
