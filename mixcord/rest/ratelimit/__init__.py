"""
Rate limiting for the REST pipeline.
"""

from mixcord.rest.ratelimit.bucket import RateLimitBucket, RateLimiter, parse_headers

__all__ = ["RateLimitBucket", "RateLimiter", "parse_headers"]
