"""Replacement strategies for the steady-state GA."""

from steady_bits.survival.replacement import breed_and_replace

__all__ = ["breed_and_replace"]
