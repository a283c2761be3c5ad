"""MedChain healthcare records backend."""
