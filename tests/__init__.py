"""
Registry Audit Tests

TEST AXIOMS:
=============
1. Determinism: identical inputs produce identical reports
2. Explicit failure: shape and transport errors raise, discrepancies are data
3. Tolerance: one malformed upload never halts a scan
"""
