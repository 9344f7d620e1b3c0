"""
Sales Dashboard Service

Ingestion and aggregation of multi-channel branch sales reports.
"""

__version__ = "1.0.0"
