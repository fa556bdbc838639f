"""
Wallet analytics: whale tier classification and the aggregation engine that
turns fetched balance, transactions and assets into a WalletAnalysis.
"""
