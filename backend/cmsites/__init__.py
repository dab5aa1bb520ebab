"""
cmsites: multi-tenant site resolution and mirrored site structure.
"""
