"""HTTP surface for interest suggestions."""
