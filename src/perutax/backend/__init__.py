"""PeruTax backend package."""
