"""HTTP API for PactBot contract records."""
