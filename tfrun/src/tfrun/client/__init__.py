from .fakes import ApiCall, FakeRemoteAPIClient
from .tfe_client import TfeClient

__all__ = [
    "ApiCall",
    "FakeRemoteAPIClient",
    "TfeClient",
]
