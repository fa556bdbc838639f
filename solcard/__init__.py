"""
SolCard: Solana wallet analysis service.

Fetches a wallet's balance, transaction history and token assets from the
Helius indexing API, derives summary statistics (whale tier, account age,
last activity, top holdings, top ecosystems) and serves them over HTTP for
a shareable card front end.
"""

__version__ = "0.1.0"
