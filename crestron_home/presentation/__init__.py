"""
Presentation Layer Package

This package contains the presentation layer components,
which are responsible for handling HTTP requests and responses.
"""

from crestron_home.presentation import controllers

__all__ = ["controllers"]
