"""Account and score services.

The classes here hold the domain rules (credential hashing, session tokens,
best-score-wins upserts) and receive their collaborators at construction, so
HTTP routes and CLI commands stay thin and tests can build them directly.
"""

from .credentials import CredentialStore
from .ledger import ScoreLedger
from .sessions import Identity, SessionAuthority

__all__ = ['CredentialStore', 'Identity', 'ScoreLedger', 'SessionAuthority']
