"""HTTP API for the payroll accrual service."""
