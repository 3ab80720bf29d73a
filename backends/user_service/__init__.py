"""
User Service - account records for the fintech platform
"""
