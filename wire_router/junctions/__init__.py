from .manager import JunctionManager, junction_type_for

__all__ = ['JunctionManager', 'junction_type_for']
