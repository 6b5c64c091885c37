"""HTTP service exposing the portfolio ledger."""
