"""IoTec gateway."""

from paygate.gateways.iotec.config import IoTecConfig
from paygate.gateways.iotec.gateway import IoTecGateway

__all__ = ["IoTecConfig", "IoTecGateway"]
