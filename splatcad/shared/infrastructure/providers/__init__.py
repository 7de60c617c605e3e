from .cloud_snapshot import JsonCloudSnapshot
from .command_inventory import CommandInventoryProvider
from .json_inventory import JsonInventoryProvider

__all__ = ["JsonInventoryProvider", "CommandInventoryProvider", "JsonCloudSnapshot"]
