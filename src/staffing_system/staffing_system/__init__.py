"""Staffing System package.

Feature modules (staff, attendance, leaves, shifts, users) each follow the
model / repository / service / controller split, with MySQL repositories and
a thin Flask JSON layer on top.
"""
