"""Concrete key-value stores."""
