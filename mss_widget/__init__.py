"""
MSS Widget service - configuration and submission log backend for the
speaking-practice widget.
"""

__version__ = "1.0.0"
