"""Settings package for the daycare booking engine.

`base.py` contains the configuration shared across environments; `dev.py`,
`prod.py` and `test.py` extend it with environment-specific overrides.
"""
