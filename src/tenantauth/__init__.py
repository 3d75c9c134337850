"""tenantauth — multi-tenant credential issuance.

Companies self-register, receive a client ID and client secret, and then
log in with owner email + access code to obtain JWT access/refresh tokens.
"""

__version__ = "0.1.0"
