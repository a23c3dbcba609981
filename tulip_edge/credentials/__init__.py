from .models import ApiAuth
from .service import CredentialStore, credential_store

__all__ = ["ApiAuth", "CredentialStore", "credential_store"]
