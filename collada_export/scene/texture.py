from typing import Union
import numpy as np


class Texture:
    """Texture embedded in the scene

    A texture with height 0 carries an already-compressed image file in
    ``data`` and ``width`` is its byte size. Otherwise ``data`` holds
    height x width RGBA texels.
    """

    def __init__(self, data: Union[bytes, np.ndarray], format_hint: str = "png",
                 width: int = 0, height: int = 0):
        """
        Initialize texture

        Args:
            data: Compressed file bytes or an (height, width, 4) uint8 array
            format_hint: File extension of the image format, without dot
            width: Texel width, or byte size for compressed data
            height: Texel height, 0 for compressed data
        """
        if isinstance(data, (bytes, bytearray)):
            self.data = bytes(data)
            self.width = width or len(self.data)
            self.height = 0
        else:
            self.data = np.asarray(data, dtype=np.uint8)
            self.height, self.width = self.data.shape[:2]
        self.format_hint = format_hint.lstrip(".") or "png"

    def is_compressed(self) -> bool:
        """Check if the texture holds compressed file bytes"""
        return self.height == 0

    def __repr__(self) -> str:
        return f"Texture(format='{self.format_hint}', width={self.width}, height={self.height})"
