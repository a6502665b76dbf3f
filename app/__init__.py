"""Trailer Deck FastAPI application package."""
