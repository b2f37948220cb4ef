"""Alert triage and the risk gate."""
