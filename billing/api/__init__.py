"""HTTP API for administrative billing tools."""
