"""
Rate-limit-aware REST pipeline.

Calls flow route -> rate limiter -> transport -> header bookkeeping ->
outcome classification -> tagged result.
"""
