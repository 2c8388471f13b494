"""Users API services: the in-memory demo service plus the legacy/v2 pair sharing one table"""
__version__ = "1.0.0"
