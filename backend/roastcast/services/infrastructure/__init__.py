"""
Infrastructure services: caching, polling, xAI transport and parsing of
model output. Nothing here knows about the roast pipeline itself.
"""
