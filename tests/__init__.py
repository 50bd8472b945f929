"""
Project-wide tests for the shared core layer (realtime events, error mapping).

App-specific tests live in each app's tests/ package (e.g. sections/tests/).
"""
