"""payrollctl — payroll and HR record keeping with declarative input validation."""

__version__ = "0.1.0"
