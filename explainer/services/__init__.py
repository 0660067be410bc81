"""
Services - state kept on behalf of the local user.
"""
