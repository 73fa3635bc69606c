"""
JPEG Icon Transcoder.

Flattens any image Pillow can decode onto an opaque black canvas of the same
size and encodes the result as JPEG. Transparent regions of the source come
out black.
"""
import asyncio
import io
from typing import Tuple

from PIL import Image

from ..interfaces import DecodeError, ImageTranscoder, TranscodedImage

BACKGROUND_COLOR = (0, 0, 0)


class JpegImageTranscoder(ImageTranscoder):
    """
    Transcoder for item icons.

    Handles:
    - Any input format Pillow detects (PNG, JPEG, GIF, BMP, TIFF, WebP, ...)
    - Alpha channels and palette transparency (composited over black)
    - Source DPI is carried over to the output
    """

    def __init__(self, quality: int = 75, max_image_dimension: int = 4096):
        """
        Initialize the transcoder.

        Args:
            quality: JPEG quality (1-95)
            max_image_dimension: Maximum allowed dimension (width/height)
                                to prevent memory exhaustion
        """
        self._quality = quality
        self._max_dimension = max_image_dimension

    async def transcode(self, data: bytes) -> TranscodedImage:
        """
        Transcode an image to JPEG over a black background.

        Args:
            data: Raw source image data

        Returns:
            TranscodedImage with the JPEG data

        Raises:
            DecodeError: If decoding fails
        """
        if not data:
            raise DecodeError("Cannot decode empty image data")

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._transcode_sync, data)

    def _transcode_sync(self, data: bytes) -> TranscodedImage:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                source_format = img.format or "UNKNOWN"

                width, height = img.size
                if width > self._max_dimension or height > self._max_dimension:
                    raise DecodeError(
                        f"Image dimensions ({width}x{height}) exceed maximum "
                        f"allowed ({self._max_dimension})"
                    )

                canvas = Image.new("RGB", (width, height), BACKGROUND_COLOR)
                if _has_transparency(img):
                    rgba = img.convert("RGBA")
                    canvas.paste(rgba, (0, 0), rgba)
                else:
                    canvas.paste(img.convert("RGB"), (0, 0))

                save_kwargs = {"format": "JPEG", "quality": self._quality}
                dpi = img.info.get("dpi")
                if dpi:
                    save_kwargs["dpi"] = tuple(round(float(d)) for d in dpi)

            output = io.BytesIO()
            canvas.save(output, **save_kwargs)

            return TranscodedImage(
                data=output.getvalue(),
                width=width,
                height=height,
                source_format=source_format,
            )

        except DecodeError:
            raise
        except Exception as e:
            raise DecodeError(f"Image decode error: {str(e)}", e)

    async def health_check(self) -> Tuple[bool, str]:
        """
        Check if the transcoder is healthy.

        Verifies Pillow can encode JPEG.
        """
        try:
            def _test():
                img = Image.new("RGB", (10, 10), color="white")
                output = io.BytesIO()
                img.save(output, format="JPEG")
                return True

            await asyncio.get_running_loop().run_in_executor(None, _test)
            return True, "Image transcoder operational (Pillow)"
        except Exception as e:
            return False, f"Image transcoder error: {str(e)}"


def _has_transparency(img: Image.Image) -> bool:
    """True when the image carries an alpha channel or palette transparency."""
    if img.mode in ("RGBA", "LA", "PA", "La", "RGBa"):
        return True
    return "transparency" in img.info
