"""
Ingestion: the wallet data source protocol, the Helius adapter and the
concurrent fetcher that degrades each failed sub-fetch to an empty default.
"""
