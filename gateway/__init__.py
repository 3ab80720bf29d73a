"""
Fintech API Gateway

Guards and forwards /api requests to the user, transaction and notification
services and reports their cached health.
"""

__version__ = "1.0.0"
