"""
Use cases for the Cardfolio API.

Each service orchestrates the repository and adapters (mailer, uploads) and
raises its own exception types; routers translate those into HTTP errors.
"""
