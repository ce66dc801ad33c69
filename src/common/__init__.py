"""
Common building blocks shared by the classification worker and starter.

This package contains reusable, domain-agnostic code:

- configuration loading (environment variables)
- logging configuration
- the Temporal client bootstrap
"""
