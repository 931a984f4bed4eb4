"""Clients for the remote prompt and image generation endpoints."""
