"""HTTP boundary over the pricing service."""
