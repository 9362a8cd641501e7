"""wargo — build and scaffolding tool for wasm-rgame projects."""

__version__ = "0.3.0"
