"""
POS billing session for the cloth shop.

Cart pricing, checkout into the order ledger, payment request generation
and payment outcome resolution.
"""
