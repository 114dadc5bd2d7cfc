from modules.utility.utility import registry

__all__ = ["registry"]
