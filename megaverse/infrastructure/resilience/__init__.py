"""API Resilience Implementations.

Contains services for handling API rate limits with retries and
exponential backoff.
Bounded Context: API Resilience
"""
