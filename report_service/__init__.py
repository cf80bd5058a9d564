"""LLM Boost report engine - service layer (settings, logging, errors, schemas)."""
