"""Users app package.

Defines the custom user model with booking roles (member, approver,
administrator) and an account status. Use ``apps.users.models.CustomUser``
as the AUTH_USER_MODEL throughout the project.
"""
