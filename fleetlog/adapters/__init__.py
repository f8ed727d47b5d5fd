"""Infrastructure adapters.

Adapters implement protocols defined in core/protocols/.
Each adapter wraps an external analytics provider (PostHog, Measurement Protocol).
"""
