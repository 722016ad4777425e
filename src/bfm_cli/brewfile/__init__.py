"""Brewfile reading and writing."""

from .packages import Packages, PACKAGE_TYPES

__all__ = ['Packages', 'PACKAGE_TYPES']
