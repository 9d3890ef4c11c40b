"""Attendance & Payroll API package.

This package is organized by feature modules (employees, attendance, leave,
payroll, auth) with a thin Flask controller layer on top of service and
repository layers.
"""
