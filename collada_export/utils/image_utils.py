import io
import numpy as np
from PIL import Image

from ..scene.texture import Texture


class ImageUtil:
    """Utility class for turning embedded textures into image files"""

    @staticmethod
    def file_extension(texture: Texture) -> str:
        """
        Get the extension of the file a texture is written to

        Args:
            texture: Embedded texture

        Returns:
            Extension without dot; raw texels are always written as PNG
        """
        return texture.format_hint if texture.is_compressed() else "png"

    @staticmethod
    def encode_texture(texture: Texture) -> bytes:
        """
        Get the file bytes of an embedded texture

        Args:
            texture: Embedded texture

        Returns:
            The compressed bytes as-is, or the texels encoded as PNG

        Raises:
            ValueError: If the texel array is not height x width x 3 or 4
        """
        if texture.is_compressed():
            return texture.data

        texels = np.asarray(texture.data, dtype=np.uint8)
        if texels.ndim != 3 or texels.shape[2] not in (3, 4):
            raise ValueError(f"Expected texels of shape (h, w, 3|4), got {texels.shape}")

        # Mode (RGB or RGBA) is inferred from the channel count
        img = Image.fromarray(texels)
        buffer = io.BytesIO()
        img.save(buffer, format='PNG')
        return buffer.getvalue()
