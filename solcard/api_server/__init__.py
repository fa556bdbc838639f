"""
API server package: HTTP interface over the wallet analysis.

Validates the wallet address and delegates to the aggregation engine.
"""
