"""Local-search optimizers, minimisation strategy and solver driver."""
