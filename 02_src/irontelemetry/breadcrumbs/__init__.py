"""Breadcrumbs module."""

from .buffer import BreadcrumbBuffer

__all__ = ["BreadcrumbBuffer"]
