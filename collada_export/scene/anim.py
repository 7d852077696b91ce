from typing import List, Optional, Dict
from .track import Track


class Anim:
    """Animation class for managing multiple tracks"""

    def __init__(self, name: str = "", duration: float = 0.0):
        """
        Initialize animation

        Args:
            name: Animation name
            duration: Animation duration in seconds
        """
        self.name = name
        self.duration = duration
        self._tracks: List[Track] = []
        self._track_map: Dict[str, List[Track]] = {}  # Target to tracks mapping

    def add_track(self, track: Track) -> None:
        """
        Add a track to the animation

        Args:
            track: Track instance to add
        """
        self._tracks.append(track)
        self._track_map.setdefault(track.target, []).append(track)

    def get_track_count(self) -> int:
        """
        Get number of tracks

        Returns:
            Track count
        """
        return len(self._tracks)

    def get_tracks_for_target(self, target: str) -> List[Track]:
        """
        Get all tracks for a specific target

        Args:
            target: Target node name

        Returns:
            List of Track instances for the target
        """
        return self._track_map.get(target, [])

    def get_track_by_property(self, target: str, property_path: str) -> Optional[Track]:
        """
        Get track by target and property path

        Args:
            target: Target node name
            property_path: Property path

        Returns:
            Track instance or None if not found
        """
        for track in self.get_tracks_for_target(target):
            if track.property_path == property_path:
                return track
        return None

    def get_target_names(self) -> List[str]:
        """
        Get all unique target names, in order of first appearance

        Returns:
            List of target names
        """
        return list(self._track_map.keys())

    def calculate_duration(self) -> float:
        """
        Calculate animation duration from all tracks

        Returns:
            Maximum end time across all tracks
        """
        return max((track.get_time_range()[1] for track in self._tracks), default=0.0)

    def update_duration_from_tracks(self) -> None:
        """Update animation duration based on track data"""
        self.duration = self.calculate_duration()

    def __repr__(self) -> str:
        return f"Anim(name='{self.name}', duration={self.duration}s, tracks={len(self._tracks)})"
