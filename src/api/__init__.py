"""FastAPI application module for ShopAffinity.

This module contains the FastAPI application and the endpoints that relay
training worker messages over HTTP.
"""
