"""
Unit Tests

Every engine is a pure function over in-memory snapshots, so these tests
need no database, network or filesystem beyond pytest's tmp_path.
Snapshots are anchored to a fixed reference time for reproducible output.
"""
