"""FastAPI application exposing the interception layer over HTTP."""
