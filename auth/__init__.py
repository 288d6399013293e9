"""auth/ -- User accounts, credential validation, tokens and the account workflow.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/ or cache/.
api/ and cache/ import from auth/, not the other way around.
"""
