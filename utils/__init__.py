"""Request, auth and bootstrap helpers."""
