"""Core pipeline for prqa: PR context, prompt composition and LLM suggestions."""
