"""RoboChamps ERP package.

This package is organized by feature modules (attendance, reports, late uploads,
sheets, meetings, ...) with a thin Flask controller layer and service/repository
layers underneath.
"""
