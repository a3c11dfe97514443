"""Domain layer (client-side tariff logic and view models).

Domain modules should not depend on UI. Backend access is passed in as a
client where a helper needs it.
"""
