"""HR payroll package.

Organized by feature modules (attendance, leaves, payroll, reports) with a thin
Flask controller layer over service/repository layers.
"""
