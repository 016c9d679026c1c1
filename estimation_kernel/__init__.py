"""
Estimation Kernel

Value objects, persistence and infrastructure for the project cost
estimation calculator:
- Immutable parameter and result types for every estimation model
- Structured JSON logging
- Typed exceptions with machine-readable codes
- Key-value persistence for the EVM inputs
"""

__version__ = "0.1.0"
