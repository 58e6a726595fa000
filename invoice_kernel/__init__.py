"""
Invoice Kernel

The computation and persistence core of the invoicing backend:
- Fixed-point Money and Rate value objects
- Fee / tax / total derivation from configurable rates
- Invoice validation that reports every violation at once
- Owner-scoped invoice queries ordered by due date
"""

__version__ = "0.1.0"
