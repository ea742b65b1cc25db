"""
Shared utilities for the mixcord REST client.

This package aggregates the cross-cutting building blocks used by the
REST pipeline:

- config: Client configuration via pydantic-settings
- logging: Structured logging with trace and request correlation
- metrics: Prometheus metrics for requests and rate-limit waits
- errors: Canonical exception types and error responses

Do not import from mixcord.rest into shared/.
"""
