"""
Which store is authoritative for the wishlist

Exactly one identity is active at a time: the device-local store while
anonymous, the server store once authenticated.
"""

from dataclasses import dataclass
from typing import Union

from .local_store import LocalStore
from .remote_store import RemoteStore

@dataclass(frozen=True)
class Anonymous:
    local: LocalStore

    is_authenticated = False

@dataclass(frozen=True)
class Authenticated:
    remote: RemoteStore

    is_authenticated = True

Identity = Union[Anonymous, Authenticated]
