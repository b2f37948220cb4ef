"""Remote scanning backends and the findings they report."""
