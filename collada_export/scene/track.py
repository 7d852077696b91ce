from typing import List, Tuple, Any
from enum import Enum
import numpy as np


class InterpolationType(Enum):
    """Enum for keyframe interpolation types"""
    LINEAR = "linear"
    STEP = "step"


class Keyframe:
    """Keyframe class for storing time-value pairs"""

    def __init__(self, time: float, value: Any):
        """
        Initialize keyframe

        Args:
            time: Time in seconds
            value: Keyframe value (vector or xyzw quaternion)
        """
        self.time = time
        self.value = value

    def __repr__(self) -> str:
        return f"Keyframe(time={self.time}, value={self.value})"


class Track:
    """Animated transform property of one target node"""

    POSITION = "position"
    ROTATION = "rotation"
    SCALE = "scale"

    def __init__(self, target: str, property_path: str = POSITION,
                 interpolation_type: InterpolationType = InterpolationType.LINEAR):
        """
        Initialize track

        Args:
            target: Target node name
            property_path: Animated property ("position", "rotation" or "scale")
            interpolation_type: How values between keyframes are computed
        """
        self.target = target
        self.property_path = property_path
        self.keyframes: List[Keyframe] = []
        self.interpolation_type = interpolation_type

    def add_keyframe(self, time: float, value: Any) -> None:
        """
        Add a keyframe to the track

        Args:
            time: Time in seconds
            value: Keyframe value
        """
        self.keyframes.append(Keyframe(float(time), np.asarray(value, dtype=float)))
        # Keep keyframes sorted by time
        self.keyframes.sort(key=lambda k: k.time)

    def get_keyframe_count(self) -> int:
        """
        Get number of keyframes

        Returns:
            Keyframe count
        """
        return len(self.keyframes)

    def get_key_times(self) -> List[float]:
        """Get keyframe times in ascending order"""
        return [k.time for k in self.keyframes]

    def get_value_at_time(self, time: float) -> Any:
        """
        Get interpolated value at specific time

        Values are clamped to the first and last keyframe outside the
        keyed range.

        Args:
            time: Time in seconds

        Returns:
            Interpolated value or None if no keyframes
        """
        if not self.keyframes:
            return None

        if time <= self.keyframes[0].time:
            return self.keyframes[0].value

        if time >= self.keyframes[-1].time:
            return self.keyframes[-1].value

        for k1, k2 in zip(self.keyframes, self.keyframes[1:]):
            if k1.time <= time <= k2.time:
                if self.interpolation_type == InterpolationType.STEP:
                    return k1.value
                t = (time - k1.time) / (k2.time - k1.time)
                return k1.value + (k2.value - k1.value) * t

        return None

    def get_time_range(self) -> Tuple[float, float]:
        """
        Get time range of the track

        Returns:
            Tuple of (start_time, end_time) or (0, 0) if no keyframes
        """
        if not self.keyframes:
            return (0.0, 0.0)
        return (self.keyframes[0].time, self.keyframes[-1].time)

    def __repr__(self) -> str:
        return f"Track(target='{self.target}', property='{self.property_path}', keyframes={len(self.keyframes)})"
