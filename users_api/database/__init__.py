"""Database package for user storage"""
from .connection import DuckDBConnectionPool
from .user_store import DuckDBUserStore, InMemoryUserStore, UserStore

__all__ = ['DuckDBConnectionPool', 'DuckDBUserStore', 'InMemoryUserStore', 'UserStore']
