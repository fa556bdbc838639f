"""
Core utilities: exceptions and address validation shared by the fetcher,
aggregation engine and API server.
"""
