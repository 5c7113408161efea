"""
Core pipeline stages: canonical message, MAC, record, and transport codec.
"""
