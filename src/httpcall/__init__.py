"""
httpcall - scriptable HTTP client

Builds a single HTTP request from command-line parameters, executes it
with timeout, retry and redirect control, and renders the response as
pretty text, JSON, headers only or body only.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

__version__ = "0.1.0"
__author__ = "DNS Science.io"
__copyright__ = "Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company"
