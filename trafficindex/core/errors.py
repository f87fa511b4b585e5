"""
Error taxonomy for TrafficIndex
"""


class TrafficIndexError(Exception):
    """Base class for all TrafficIndex errors"""
    pass


class UpstreamError(TrafficIndexError):
    """Directions provider returned no usable route or the request failed"""
    pass


class MissingDataError(UpstreamError):
    """A route was found but its timing fields are absent or zero"""
    pass


class NoDataError(TrafficIndexError):
    """Every corridor failed while computing the traffic index"""
    pass


class BadRequestError(TrafficIndexError):
    """Required request parameters are missing or malformed"""
    pass
