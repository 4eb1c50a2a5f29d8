"""
System Gate – the global on/off switch and the admin slot.
"""

from medledger.models import SystemConfig
from medledger.rbac import require_admin
from medledger.storage import Transaction

SYSTEM_KEY = "system"


def load_config(tx: Transaction) -> SystemConfig:
    return SystemConfig.from_dict(tx.get(SYSTEM_KEY))


def ensure_config(tx: Transaction, deployer: str) -> SystemConfig:
    """Initialise the gate on a fresh store; keep whatever an existing store holds."""
    data = tx.get(SYSTEM_KEY)
    if data is not None:
        return SystemConfig.from_dict(data)
    config = SystemConfig(admin=deployer, active=True)
    tx.put(SYSTEM_KEY, config.to_dict())
    return config


def toggle(tx: Transaction, caller: str) -> bool:
    config = load_config(tx)
    require_admin(caller, config)
    config.active = not config.active
    tx.put(SYSTEM_KEY, config.to_dict())
    return config.active


def transfer_admin(tx: Transaction, caller: str, new_admin: str) -> None:
    # Single step: a mistyped new_admin cannot be undone.
    config = load_config(tx)
    require_admin(caller, config)
    config.admin = new_admin
    tx.put(SYSTEM_KEY, config.to_dict())
