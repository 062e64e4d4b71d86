"""Utility functions used in potentially multiple places by snapshare.

Functions are organized into the following submodules:

- logging: Logger configuration
- network: HTTP request utilities
- images: Accepted image formats and temporary file materialization
- imgur: Client for the Imgur image hosting API
"""
