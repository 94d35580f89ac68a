"""
ConfKeeper - Versioned Monitoring Configuration Store
=======================================================

ConfKeeper keeps monitoring configuration (prometheus.yml, alert rule files,
alertmanager.yml) in an eventually-consistent key-value backend such as
Kubernetes ConfigMaps, and keeps a bounded, time-ordered history of every
file's previous versions.

Architecture Layers (top to bottom):
    1. Facade          - ConfKeeper: wiring and lifecycle
    2. Store           - VersionedStore: validate → archive → trim → commit
    3. Validation      - structural checks, promtool / amtool
    4. Versioning      - version keys and retention policy
    5. Infrastructure  - BackendAdapter (confirmed writes), backends

Quick Start:
    >>> from confkeeper import ConfKeeper
    >>> async with ConfKeeper() as keeper:
    ...     outcome = await keeper.store("alertrules").put("a.rules", body)
"""

__version__ = "0.1.0"

from confkeeper.facade import ConfKeeper

__all__ = ["ConfKeeper", "__version__"]
