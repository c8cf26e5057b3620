"""
Sonundrum - Rule engine for the Simon Sonundrum puzzle module.

Simon gives one command per stage. Whether a command must be followed is
decided by a rule that commands themselves can rewrite. The package
provides:
- Weighted random generation of commands
- Composable validators deciding which commands apply
- Stage progression driven by other modules being solved
- In-memory sessions, a REST API and a CLI for playing it
"""

__version__ = "0.1.0"
