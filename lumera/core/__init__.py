"""Core infrastructure: configuration, database, security, caching"""
