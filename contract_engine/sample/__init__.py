"""
Sample contract: delivery lane status, timer ingestion and chat capture.
"""

from .delivery import DeliveryLaneContract, LANE_KEY, CHAT_LAST_KEY

__all__ = [
    "DeliveryLaneContract",
    "LANE_KEY",
    "CHAT_LAST_KEY",
]
