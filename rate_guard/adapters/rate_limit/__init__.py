"""Counter store adapters.

This package provides the single atomic capability the rate limiter needs from
its shared store, with a Redis implementation for deployments and an in-memory
one for local development and tests.
"""
