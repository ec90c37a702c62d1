"""
YouTube Data API video search client.
"""
