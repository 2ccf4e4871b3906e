"""Monthly payroll accrual engine."""

__version__ = "0.1.0"
