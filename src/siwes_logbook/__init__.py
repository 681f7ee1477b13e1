"""SIWES logbook package.

Organized by feature modules (attendance, weeks, grading, ...) with a thin
Flask controller layer on top of service/repository layers.
"""
