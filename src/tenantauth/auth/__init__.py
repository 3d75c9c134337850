"""Authentication.

Learn: One authentication path:
companies → owner email + access code + client credentials → JWT
access/refresh tokens. The access token (cookie or Bearer header)
resolves to the current Company on protected routes.
"""
