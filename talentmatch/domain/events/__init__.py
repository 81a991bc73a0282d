"""Domain Event definitions.

Represents significant occurrences in the resilience layer (deferred requests,
scheduled retries, provider fallbacks) that callers may observe through an
event handler callback.
"""
