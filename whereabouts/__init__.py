"""Top-level package for the whereabouts location resolver.

Given a note mentioning people and cities, the resolver explores who was
seen where through the Centrala lookup API, collects the places where
the target currently appears, and submits them one by one until an
answer is accepted.
"""

__version__ = "0.1.0"
