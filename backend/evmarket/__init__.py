"""
EV Marketplace Backend

Service core for the electric-vehicle marketplace: cache-aside record
services over SQLAlchemy repositories and a Redis-backed cache store.
"""

__version__ = "0.1.0"
