"""
Systems module - logika rozgrywki nad store.

Zawiera:
- ResourceEconomy: Nocne zużycie, niedobory, kary sanity
- Scheduler: Kontynuacje z wirtualnym zegarem
- PhaseCycle: Maszyna stanów dnia i nocy
"""

from .resource_economy import (
    ResourceEconomy,
    NightCosts,
    NightReport,
    ResourceWarning,
    TerminalOutcome,
)
from .scheduler import Scheduler, Continuation
from .phase_cycle import PhaseCycle, Awaiting, CycleStatus, DuskChoice

__all__ = [
    "ResourceEconomy", "NightCosts", "NightReport", "ResourceWarning", "TerminalOutcome",
    "Scheduler", "Continuation",
    "PhaseCycle", "Awaiting", "CycleStatus", "DuskChoice",
]
