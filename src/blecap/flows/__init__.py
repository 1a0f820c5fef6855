from .flow_models import DeviceFlow, FlowReconstructor

__all__ = ["DeviceFlow", "FlowReconstructor"]
