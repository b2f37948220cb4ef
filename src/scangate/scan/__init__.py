"""Spider and active scan coordinators."""
