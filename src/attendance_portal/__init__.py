"""College attendance portal.

Organized by feature modules (users, courses, academic_years, students,
attendance, reports) with a thin Flask controller layer over service and
repository layers. Repositories talk to the external REST backend through
``api.client``.
"""
