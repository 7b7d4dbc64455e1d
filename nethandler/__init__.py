"""
An HTTP client that layers response classification, JSON decoding and an
in-memory response cache over a pluggable transport.
"""
