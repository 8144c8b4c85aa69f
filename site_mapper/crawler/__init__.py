"""
Crawler core: link normalization, content gating, fetching and scheduling.
"""
