"""MemoryShare guest media collection API."""
