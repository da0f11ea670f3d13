"""Design-token normalization and Kotlin/Compose code generation."""

__version__ = "0.1.0"
