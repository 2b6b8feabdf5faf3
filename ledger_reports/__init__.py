"""
Ledger Reports - Source Package

Report generation engine that turns per-account transaction ledgers
into account, yearly and financial-statement summaries.

DESIGN PRINCIPLES:
1. Every run recomputes from the full input set
2. Fail the job, not the process
3. Dirty data is tolerated, missing data is not
4. Output is deterministic for unchanged input
5. Every job run is auditable
"""

__version__ = "1.0.0"
__author__ = "Ledger Reports Team"
