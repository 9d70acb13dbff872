"""Tool argument schemas."""
