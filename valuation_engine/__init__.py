"""Exit valuation and buyer-readiness scoring engine."""
