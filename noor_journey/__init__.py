"""Noor Journey family memorisation tracker."""

__version__ = "0.3.0"
