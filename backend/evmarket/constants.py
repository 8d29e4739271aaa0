"""
EV Marketplace Constants

Shared constants for cache key taxonomy and default lifetimes.
"""

# Record caches are refreshed at most once per hour
RECORD_CACHE_TTL_SECONDS = 3600

# Cache key shapes
RECORD_KEY_PREFIX = "record_"
RECORDS_COLLECTION_KEY = "records"
RECORDS_BY_SELLER_PREFIX = "records_seller_"

MAX_CACHE_KEY_LENGTH = 250
