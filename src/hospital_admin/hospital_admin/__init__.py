"""Hospital administration package.

Organized by feature modules (staff, shifts, roster, users, messages) with a
thin Flask controller layer over service/repository layers.
"""
