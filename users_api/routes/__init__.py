"""API routers for the users, v2 and legacy services"""
