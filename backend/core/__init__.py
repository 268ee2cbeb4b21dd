"""Core logic for pool slope signals and the virtual trade ledger.

This package contains pure business logic with no I/O dependencies
(no broker, decoder, or network access). The application layer (app/)
feeds it decoded records and reports on its state.
"""
