"""
Blog posts: storage, business rules and HTTP endpoints.
"""
