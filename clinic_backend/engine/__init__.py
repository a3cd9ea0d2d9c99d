# engine/__init__.py

"""
CLINIC LEDGER ENGINE

In-process entry points (engine.operations) for every money- or
stock-moving operation. Each call is one atomic unit and returns an
OperationResult instead of raising.
"""
