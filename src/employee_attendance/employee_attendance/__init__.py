"""Employee Attendance package.

This package is organized by feature modules (employees, attendance, ...)
with a thin Flask controller layer and command/query handlers over
repository and unit-of-work abstractions.
"""
