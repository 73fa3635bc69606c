"""Image transcoding adapters."""
from .transcoder import JpegImageTranscoder

__all__ = ["JpegImageTranscoder"]
