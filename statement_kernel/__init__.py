"""
Statement Kernel

The report-table engine behind the financial statement views:
- Account hierarchy reconstruction from flat ledger records
- Depth-first row rendering with per-subtree subtotals
- Runtime column state (width, visibility) and its gesture controllers
"""

__version__ = "0.1.0"
