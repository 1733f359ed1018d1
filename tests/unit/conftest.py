"""
Unit test fixtures. Pure engine and service tests; no network.
"""
