"""
Backend service stubs behind the API gateway
"""
