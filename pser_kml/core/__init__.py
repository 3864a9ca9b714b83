"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- exceptions: Domain exception taxonomy
- ingress: HTTP request decoding and response shaping
"""
