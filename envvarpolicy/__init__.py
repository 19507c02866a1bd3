"""Admission policy that checks the environment variables of Pod containers against a rule."""

__version__ = "2.0.2"
__all__ = ["__version__"]