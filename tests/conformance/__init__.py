"""
Conformance Test Suite

Property-based tests for the replay invariants. Any change to the engine,
the account operations or the event handlers MUST keep these passing.

The tests are organized by invariant:
1. conservation.py - total == available + held, funds only move as recorded
2. atomicity.py - Failed operations and failed runs change nothing
3. idempotency.py - Repeated or out-of-place events are no-ops
4. determinism.py - Same input, same output

Input sequences are generated with hypothesis (see strategies.py).
"""
