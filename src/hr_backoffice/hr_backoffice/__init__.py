"""HR back-office package.

This package is organized by feature modules (users, attendance, payroll,
requests, notifications) with a thin Flask controller layer over
service/repository layers.
"""
