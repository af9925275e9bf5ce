"""Class attendance tracker package.

Feature modules (auth, students, attendance, reports) each carry a model,
an owner-scoped repository, a service, and a thin Flask controller.
"""
