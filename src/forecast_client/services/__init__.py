"""
Shared utilities for talking to the Forecast API.

- http.py - requests.Session with retry/backoff and a default timeout
"""
