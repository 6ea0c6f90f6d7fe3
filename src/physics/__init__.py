"""Travel-cost model."""
