"""Analysis tools: validated, JSON-friendly wrappers over core/ and ingestion/."""
