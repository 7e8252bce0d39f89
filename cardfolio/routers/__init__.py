"""
FastAPI routers grouped by section (auth, profile, about, blog, portfolio, resume...).

Each module exposes an APIRouter included by app.py. Routers stay thin: they
parse the request, call a service and wrap the result in the response envelope.
"""
