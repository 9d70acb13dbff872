"""Play Developer API client."""
