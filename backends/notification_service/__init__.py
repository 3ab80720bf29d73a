"""
Notification Service - email, sms and push notifications per user
"""
