"""Scan session state, plans and orchestration."""
