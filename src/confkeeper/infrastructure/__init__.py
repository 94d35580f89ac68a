"""
confkeeper.infrastructure - Backend Layer
===========================================

    ┌─────────────── STORE LAYER ─────────────────────────┐
    │  VersionedStore (one per ArtifactGroup)              │
    └─────────────────────┬───────────────────────────────┘
                          │ read / commit
                          ▼
    ┌─────────────── INFRASTRUCTURE LAYER ────────────────┐
    │  BackendAdapter   (error mapping + write confirm)   │
    │        │                                            │
    │  KeyValueBackend (ABC)                              │
    │    ├── InMemoryKeyValueBackend                      │
    │    └── ConfigMapBackend                             │
    └──────────────────────────────────────────────────────┘

Usage:
    from confkeeper.infrastructure import BackendAdapter, InMemoryKeyValueBackend
"""

from confkeeper.infrastructure.adapter import BackendAdapter
from confkeeper.infrastructure.backend import (
    InMemoryKeyValueBackend,
    KeyValueBackend,
)
from confkeeper.infrastructure.configmap import ConfigMapBackend

__all__ = [
    "BackendAdapter",
    "KeyValueBackend",
    "InMemoryKeyValueBackend",
    "ConfigMapBackend",
]
