"""
Transaction Service - credit and debit records per user
"""
