"""School Attendance package.

Multi-tenant school attendance backend organized by feature modules
(users, attendance, teacher_attendance) with a thin Flask controller layer
over service and repository layers.
"""
