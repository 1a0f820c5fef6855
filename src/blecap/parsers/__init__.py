from .advertising import parse, parse_frame
from .ad_structures import AD_DECODERS, AdvertisingData, decode_advertising_data

__all__ = [
    "parse",
    "parse_frame",
    "AD_DECODERS",
    "AdvertisingData",
    "decode_advertising_data",
]
