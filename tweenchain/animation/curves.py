"""
Curve-asset adapters.

Wraps externally authored keyframe curves behind the same progress -> weight
contract as the easing catalog. A curve asset is keyframe data:

    - one (N, 2) array-like of (time, value) pairs,
    - a sequence of such channels, or
    - any object with a ``channels`` attribute holding them.

Keyframe times are normalised to [0, 1] so an asset authored over any time
range maps onto a track's progress.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from tweenchain.logging.logger import get_logger
from tweenchain.utils.decorators import suppress_exceptions

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class CurveAdapter:
    """One evaluable channel of a curve asset."""
    times: np.ndarray    # normalised, ascending, starts at 0.0
    values: np.ndarray
    channel_index: int = 0

    def evaluate(self, progress: float) -> float:
        """Sample the channel at ``progress`` (piecewise linear, clamped at the ends)."""
        return float(np.interp(progress, self.times, self.values))

    @property
    def keyframe_count(self) -> int:
        return int(self.times.shape[0])


def _channels_of(curve_asset: Any) -> Optional[list]:
    """Return the list of raw channels in an asset, or None if it has no recognised shape."""
    if curve_asset is None or isinstance(curve_asset, (str, bytes)):
        return None

    channels = getattr(curve_asset, "channels", None)
    if channels is not None:
        return list(channels)

    if isinstance(curve_asset, np.ndarray):
        return [curve_asset] if curve_asset.ndim == 2 else list(curve_asset)

    items = list(curve_asset)
    if not items:
        return None
    # A bare list of (time, value) pairs is a single channel
    first = items[0]
    if len(first) == 2 and all(np.isscalar(v) for v in first):
        return [items]
    return items


def _keyframes_of(channel: Any) -> Optional[tuple[np.ndarray, np.ndarray]]:
    points = np.asarray(channel, dtype=float)
    if points.ndim != 2 or points.shape[1] != 2 or points.shape[0] == 0:
        return None
    if not np.all(np.isfinite(points)):
        return None

    order = np.argsort(points[:, 0], kind="stable")
    times = points[order, 0]
    values = points[order, 1]

    span = times[-1] - times[0]
    if span > 0:
        times = (times - times[0]) / span
    else:
        # Single keyframe (or all at one instant): constant curve
        times = np.zeros_like(times)
    return times, values


@suppress_exceptions(logger, "Invalid curve asset", return_value=None, log_level="warning")
def make_curve_adapter(curve_asset: Any, channel_index: int = 0) -> Optional[CurveAdapter]:
    """
    Build an easing adapter for one channel of a curve asset.

    Args:
        curve_asset: Keyframe data (see module docstring)
        channel_index: Channel to evaluate

    Returns:
        CurveAdapter, or None when the asset is malformed or the channel
        index is out of range
    """
    channels = _channels_of(curve_asset)
    if not channels:
        logger.warning("Curve asset has no recognisable channels: %r", type(curve_asset).__name__)
        return None

    if not isinstance(channel_index, int) or not 0 <= channel_index < len(channels):
        logger.warning(
            "Curve channel index %r out of range (channels=%d)", channel_index, len(channels)
        )
        return None

    keyframes = _keyframes_of(channels[channel_index])
    if keyframes is None:
        logger.warning("Curve channel %d is not an (N, 2) keyframe array", channel_index)
        return None

    times, values = keyframes
    logger.debug("Curve adapter created (channel=%d, keys=%d)", channel_index, times.shape[0])
    return CurveAdapter(times=times, values=values, channel_index=channel_index)
