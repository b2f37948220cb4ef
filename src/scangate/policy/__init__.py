"""Policy categories, rule tuning and false-positive rules."""
